"""
Hidden Gems Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the different failure classes.
Why:   Each class maps to exactly one HTTP status in the global handlers
       (registered in main.py), so services raise and never build responses.
How:   Each exception carries a client-safe message and an optional context
       dict that is logged but not returned (except validation details).

Exception Hierarchy:
    HiddenGemsError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    │   ├── MissingFieldsError   → 400 Bad Request (title/description/category)
    │   └── InvalidGemIdError    → 400 Bad Request (malformed ObjectId)
    ├── NotFoundError            → 404 Not Found
    ├── DatabaseError            → 500 Internal Server Error
    └── StoreConnectionError     → fatal at startup (never reaches a handler)
"""

from typing import Any, Dict, List, Optional


class HiddenGemsError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged, not returned for server errors)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HiddenGemsError):
    """
    Raised when client input fails validation.

    When:    Missing required gem fields, body that is not a JSON object.
    HTTP:    400 Bad Request

    Example response:
        {
            "error": "validation_error",
            "message": "Missing required gem fields (title, category)",
            "details": {"missing_fields": ["title", "category"]}
        }
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class MissingFieldsError(ValidationError):
    """Raised when a new gem lacks one or more required fields."""

    def __init__(self, missing: List[str]):
        super().__init__(
            message=f"Missing required gem fields ({', '.join(missing)})",
            context={"missing_fields": list(missing)},
        )
        self.missing = list(missing)


class InvalidGemIdError(ValidationError):
    """
    Raised when a path identifier is not a valid ObjectId string.

    Raised before any store access, so a malformed id never costs a round trip.
    """

    def __init__(self, gem_id: str):
        super().__init__(
            message="Invalid Gem ID format",
            field="id",
            context={"value": gem_id},
        )
        self.gem_id = gem_id


class NotFoundError(HiddenGemsError):
    """
    Raised when no gem matches a well-formed identifier.

    HTTP:    404 Not Found

    The delete path uses a custom message because the server cannot tell
    "never existed" from "already removed".
    """

    def __init__(
        self,
        message: str = "Hidden gem not found",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class DatabaseError(HiddenGemsError):
    """
    Raised when a MongoDB operation fails.

    HTTP:    500 Internal Server Error

    The message is fixed per operation ("Failed to fetch hidden gems", ...).
    Driver details go into `context` and the server log only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreConnectionError(HiddenGemsError):
    """
    Raised when the startup ping to MongoDB fails.

    Raised from the application lifespan; uvicorn aborts startup and the
    process exits instead of serving traffic without a database.
    """

    def __init__(
        self,
        message: str = "Failed to connect to MongoDB",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
