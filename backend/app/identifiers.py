"""
Hidden Gems Backend — Gem Identifiers
======================================

What:  The boundary between path strings and MongoDB ObjectIds.
Why:   Every by-id operation must reject malformed identifiers with a 400
       before touching the store. Keeping the check here means the service
       never builds an ObjectId by hand.
How:   `is_valid_gem_id` is the predicate, `parse_gem_id` the parse-or-fail
       constructor. Both defer to bson's own ObjectId rules (24 hex chars).
"""

from bson import ObjectId

from app.exceptions import InvalidGemIdError


def is_valid_gem_id(value: str) -> bool:
    """True if `value` is a 24-character hex ObjectId string."""
    return isinstance(value, str) and ObjectId.is_valid(value)


def parse_gem_id(value: str) -> ObjectId:
    """
    Convert a path identifier into an ObjectId.

    Raises:
        InvalidGemIdError: `value` is not a well-formed ObjectId string (→ 400)
    """
    if not is_valid_gem_id(value):
        raise InvalidGemIdError(value)
    return ObjectId(value)
