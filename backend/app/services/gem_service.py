"""
Hidden Gems Backend — Gem Service
==================================

What:  The five operations over the `hidden_gems` collection.
Why:   Keeps validation, store calls and outcome mapping out of the route
       handlers, so they can be tested against a mocked collection.
How:   Each method performs exactly one MongoDB operation. Client mistakes
       raise ValidationError subclasses before the store is touched; store
       failures are logged and re-raised as DatabaseError with a fixed
       per-operation message.
Who:   Built per request by `app.database.get_gem_service`.

Update Outcomes:
    update_one reports matched/modified counts. They are reduced to an
    explicit three-way GemUpdateStatus so the route never inspects driver
    results:

        matched == 0                 → NOT_FOUND   (404)
        matched == 1, modified == 0  → UNCHANGED   (200, "no changes")
        matched == 1, modified == 1  → UPDATED     (200)

Known Gap:
    `submissionDate` is only stamped on create. Update payloads may still
    overwrite it; only `_id` is stripped.
"""

import enum
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from bson.errors import BSONError
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import PyMongoError

from app.exceptions import DatabaseError, MissingFieldsError, NotFoundError
from app.identifiers import parse_gem_id
from app.schemas.gem import GemCreatedResponse, serialize_gem

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "category")

# Driver failures plus BSON encoding failures (OverflowError for ints beyond
# 64 bits), all raised from inside insert_one/update_one
STORE_ERRORS = (PyMongoError, BSONError, OverflowError)

# Fields a client can never set through update
IMMUTABLE_FIELDS = ("_id",)


class GemUpdateStatus(enum.Enum):
    NOT_FOUND = "not_found"
    UNCHANGED = "unchanged"
    UPDATED = "updated"


def submission_timestamp() -> datetime:
    """Current UTC time truncated to the millisecond precision BSON dates keep."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def missing_required_fields(payload: Dict[str, Any]) -> List[str]:
    """Required fields that are absent or empty (None, "", 0, False, [])."""
    return [field for field in REQUIRED_FIELDS if not payload.get(field)]


class GemService:
    """
    Operations on one gems collection.

    Stateless apart from the collection handle, which is shared by every
    request through the lifespan-owned MongoConnection.
    """

    def __init__(self, collection: AsyncCollection):
        self.collection = collection

    async def list_gems(self) -> List[Dict[str, Any]]:
        """Every gem in the collection, in the store's natural order."""
        try:
            documents = await self.collection.find({}).to_list(None)
        except STORE_ERRORS as e:
            logger.error("Error fetching all gems: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch hidden gems",
                context={"error_type": type(e).__name__},
            )
        return [serialize_gem(document) for document in documents]

    async def get_gem(self, gem_id: str) -> Dict[str, Any]:
        """
        Retrieve a single gem.

        Raises:
            InvalidGemIdError: malformed identifier (→ 400, no store call)
            NotFoundError: no gem with this identifier (→ 404)
            DatabaseError: query failed (→ 500)
        """
        oid = parse_gem_id(gem_id)
        try:
            document = await self.collection.find_one({"_id": oid})
        except STORE_ERRORS as e:
            logger.error("Error fetching gem %s: %s", gem_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to fetch hidden gem",
                context={"gem_id": gem_id, "error_type": type(e).__name__},
            )

        if document is None:
            raise NotFoundError(resource_id=gem_id)
        return serialize_gem(document)

    async def create_gem(self, payload: Dict[str, Any]) -> GemCreatedResponse:
        """
        Validate and insert a new gem.

        The store generates `_id`, so a client-supplied one is dropped;
        `submissionDate` is always the server's clock.

        Raises:
            MissingFieldsError: title, description or category missing (→ 400)
            DatabaseError: insert failed (→ 500)
        """
        missing = missing_required_fields(payload)
        if missing:
            raise MissingFieldsError(missing)

        document = {key: value for key, value in payload.items() if key != "_id"}
        document["submissionDate"] = submission_timestamp()

        try:
            result = await self.collection.insert_one(document)
        except STORE_ERRORS as e:
            logger.error("Error adding gem: %s", str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to add hidden gem",
                context={"error_type": type(e).__name__},
            )

        # insert_one sets document["_id"]; keep it explicit for readers
        document["_id"] = result.inserted_id
        logger.info("Gem %s created (%s)", result.inserted_id, document.get("title"))

        return GemCreatedResponse(
            message="Hidden gem added successfully",
            insertedId=str(result.inserted_id),
            newGem=serialize_gem(document),
        )

    async def update_gem(self, gem_id: str, payload: Dict[str, Any]) -> GemUpdateStatus:
        """
        Merge the supplied fields into an existing gem.

        Only the supplied keys are sent in `$set`; everything else on the
        stored document is left untouched. MongoDB rejects an empty `$set`,
        so a body with nothing to set becomes an existence check.

        Raises:
            InvalidGemIdError: malformed identifier (→ 400, no store call)
            DatabaseError: update failed (→ 500)
        """
        oid = parse_gem_id(gem_id)
        fields = {key: value for key, value in payload.items() if key not in IMMUTABLE_FIELDS}

        try:
            if not fields:
                matched = await self.collection.count_documents({"_id": oid}, limit=1)
                modified = 0
            else:
                result = await self.collection.update_one({"_id": oid}, {"$set": fields})
                matched = result.matched_count
                modified = result.modified_count
        except STORE_ERRORS as e:
            logger.error("Error updating gem %s: %s", gem_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to update hidden gem",
                context={"gem_id": gem_id, "error_type": type(e).__name__},
            )

        if matched == 0:
            return GemUpdateStatus.NOT_FOUND
        if modified == 0:
            return GemUpdateStatus.UNCHANGED
        logger.info("Gem %s updated (fields: %s)", gem_id, ", ".join(sorted(fields)))
        return GemUpdateStatus.UPDATED

    async def delete_gem(self, gem_id: str) -> None:
        """
        Permanently remove a gem.

        Raises:
            InvalidGemIdError: malformed identifier (→ 400, no store call)
            NotFoundError: nothing deleted (→ 404)
            DatabaseError: delete failed (→ 500)
        """
        oid = parse_gem_id(gem_id)
        try:
            result = await self.collection.delete_one({"_id": oid})
        except STORE_ERRORS as e:
            logger.error("Error deleting gem %s: %s", gem_id, str(e), exc_info=True)
            raise DatabaseError(
                message="Failed to delete hidden gem",
                context={"gem_id": gem_id, "error_type": type(e).__name__},
            )

        if result.deleted_count == 0:
            raise NotFoundError(
                message="Hidden gem not found or already deleted",
                resource_id=gem_id,
            )
        logger.info("Gem %s deleted", gem_id)
