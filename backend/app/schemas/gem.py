"""
Hidden Gems Backend — Pydantic Request/Response Schemas
========================================================

What:  Pydantic models defining the API contract, plus the BSON → JSON
       conversion for stored gem documents.
Why:   Gem documents are schemaless apart from three required fields, so
       records travel as plain dicts; the wrappers around them (create
       result, messages, errors) are typed for OpenAPI docs.
How:   `serialize_gem` turns ObjectId and datetime values into the JSON
       forms clients already rely on: hex strings and ISO 8601 with a `Z`.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Document serialization
# ══════════════════════════════════════════════════════════════════════════


def format_timestamp(value: datetime) -> str:
    """
    ISO 8601 in UTC with millisecond precision, e.g. 2024-01-15T12:00:00.123Z.

    Naive datetimes are treated as UTC, which is how MongoDB stores them.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_jsonable(value: Any) -> Any:
    """Recursively convert BSON-specific values into JSON-compatible ones."""
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        return format_timestamp(value)
    if isinstance(value, dict):
        return {key: to_jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    return value


def serialize_gem(document: Dict[str, Any]) -> Dict[str, Any]:
    """Stored gem document → response body dict (keeps the `_id` key)."""
    return to_jsonable(document)


# ══════════════════════════════════════════════════════════════════════════
# Response Models — What the API returns to clients
# ══════════════════════════════════════════════════════════════════════════


class MessageResponse(BaseModel):
    """Returned by PUT and DELETE on success."""
    message: str = Field(description="Human-readable outcome")


class GemCreatedResponse(BaseModel):
    """
    What:  Response after a gem is stored.
    Who:   Returned by POST /api/gems with HTTP 201 Created.

    Field names are camelCase because existing clients read
    `insertedId` and `newGem` directly.
    """
    message: str = Field(
        default="Hidden gem added successfully",
        description="Human-readable success message",
    )
    insertedId: str = Field(description="Identifier generated by the store")
    newGem: Dict[str, Any] = Field(
        description="The stored gem, including `_id` and `submissionDate`"
    )


# ══════════════════════════════════════════════════════════════════════════
# Error Response Models — Consistent error format across all endpoints
# ══════════════════════════════════════════════════════════════════════════


class ErrorResponse(BaseModel):
    """
    Standardized error body for every failure.

    Example:
        {
            "error": "validation_error",
            "message": "Invalid Gem ID format",
            "details": {"field": "id", "value": "not-an-id"},
            "request_id": "3f2a9c1e"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Health check response showing service and database status."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
