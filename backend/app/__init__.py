"""
Hidden Gems Backend — Application Package Initializer
=====================================================

What: Marks the `app` directory as a Python package.
Why:  Enables module imports like `from app.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend keeps the usual layered split, even though every layer is thin:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (Gem operations)    │  ← Validation, outcome mapping
    ├─────────────────────────────────────┤
    │   Schemas & Identifiers (Contract)  │  ← Pydantic models, ObjectId parsing
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async MongoDB client lifecycle
    └─────────────────────────────────────┘

    Routes translate service results into status codes; services talk to the
    `hidden_gems` collection and never see a Request object.
"""

__version__ = "1.0.0"
