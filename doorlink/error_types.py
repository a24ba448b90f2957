"""
Door validation error taxonomy.

Every finding the graph validator can report has exactly one DoorErrorType.
None of them is fatal to validation itself; gates decide what to do with them.
"""

from enum import Enum


class DoorErrorType(str, Enum):
    """Categories of door validation findings."""

    INVALID_ID_FORMAT = "invalid_id_format"
    DUPLICATE_ID = "duplicate_id"
    EMPTY_TARGET_DOCUMENT = "empty_target_document"
    EMPTY_TARGET_DOOR_ID = "empty_target_door_id"
    SELF_LINK = "self_link"
    UNRESOLVED_TARGET_DOCUMENT = "unresolved_target_document"
    UNRESOLVED_TARGET_DOOR = "unresolved_target_door"


LINK_ERROR_TYPES = frozenset(
    {
        DoorErrorType.EMPTY_TARGET_DOCUMENT,
        DoorErrorType.EMPTY_TARGET_DOOR_ID,
        DoorErrorType.SELF_LINK,
        DoorErrorType.UNRESOLVED_TARGET_DOCUMENT,
        DoorErrorType.UNRESOLVED_TARGET_DOOR,
    }
)
