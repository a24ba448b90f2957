"""
Graph validator for door ids and door links.

Read-only scan of one document. Findings are returned as data in encounter
order; the validator never raises for a broken id or link.
"""

from dataclasses import dataclass
from typing import Any

from ..doors.identity import is_valid_id
from ..error_types import DoorErrorType
from ..exceptions import DoorLinkError
from ..models import Document, Door
from ..persistence.accessor import DocumentAccessor
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once

logger = get_logger(__name__)


@dataclass(frozen=True)
class DoorRef:
    """Reference to the offending door: its document and position in the entity list."""

    document_guid: str
    document_path: str
    entity_index: int
    door_id: str
    door_name: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "document_guid": self.document_guid,
            "document_path": self.document_path,
            "entity_index": self.entity_index,
            "door_id": self.door_id,
            "door_name": self.door_name,
        }


class DoorValidationError:
    """A single validation finding with its category and offending door."""

    def __init__(self, error_type: DoorErrorType, message: str, door: DoorRef):
        """
        Initialize a validation finding.

        Args:
            error_type: Category of the finding
            message: Human-readable description
            door: Reference to the offending door
        """
        self.error_type = error_type
        self.message = message
        self.door = door

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary format."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "door": self.door.to_dict(),
        }

    def __str__(self) -> str:
        return f"{self.error_type.value}: {self.message}"

    def __repr__(self) -> str:
        return f"DoorValidationError({self.error_type.name}, {self.message!r})"


class GraphValidator:
    """
    Validates door ids (format and uniqueness) and links (document and door exist).

    Target documents that are not open are loaded transiently through the
    accessor and released before the next door is checked.
    """

    def __init__(self, accessor: DocumentAccessor):
        """
        Initialize the graph validator.

        Args:
            accessor: Document accessor used to resolve and open target documents
        """
        self.accessor = accessor

    def validate(self, document: Document) -> list[DoorValidationError]:
        """
        Validate every door of a document.

        Args:
            document: Document to scan

        Returns:
            Complete, ordered list of findings (empty when the document is clean)
        """
        errors: list[DoorValidationError] = []
        indexed = [(index, entity) for index, entity in enumerate(document.entities) if isinstance(entity, Door)]

        seen: dict[str, Door] = {}
        for index, door in indexed:
            ref = self._ref(document, index, door)
            if not is_valid_id(door.door_id):
                errors.append(
                    DoorValidationError(
                        DoorErrorType.INVALID_ID_FORMAT,
                        f"Door has invalid DoorId '{door.door_id}'. Allowed [0-9a-zA-Z_-], length 1..64.",
                        ref,
                    )
                )
                continue

            if door.door_id in seen:
                errors.append(
                    DoorValidationError(
                        DoorErrorType.DUPLICATE_ID,
                        f"Duplicate DoorId '{door.door_id}' in document '{document.display_path}'.",
                        ref,
                    )
                )
            else:
                seen[door.door_id] = door

        for index, door in indexed:
            error = self._validate_link(document, index, door)
            if error is not None:
                errors.append(error)

        if errors:
            logger.debug("Document has door errors", document_guid=document.guid, errors=len(errors))
        return errors

    def validate_many(self, documents: list[Document]) -> list[DoorValidationError]:
        """Validate several documents and concatenate their findings."""
        errors: list[DoorValidationError] = []
        for document in documents:
            errors.extend(self.validate(document))
        return errors

    def _ref(self, document: Document, index: int, door: Door) -> DoorRef:
        return DoorRef(
            document_guid=document.guid,
            document_path=document.display_path,
            entity_index=index,
            door_id=door.door_id,
            door_name=door.name,
        )

    def _validate_link(self, document: Document, index: int, door: Door) -> DoorValidationError | None:
        link = door.link
        if link.is_empty():
            return None

        ref = self._ref(document, index, door)

        if not link.target_document_guid.strip():
            return DoorValidationError(
                DoorErrorType.EMPTY_TARGET_DOCUMENT, f"Door '{door.door_id}' has no Target Document.", ref
            )

        if not link.target_door_id.strip():
            return DoorValidationError(
                DoorErrorType.EMPTY_TARGET_DOOR_ID, f"Door '{door.door_id}' has empty Target Door ID.", ref
            )

        if link.points_to(document.guid, door.door_id):
            return DoorValidationError(
                DoorErrorType.SELF_LINK, f"Door '{door.door_id}' points to itself. Self-links are not allowed.", ref
            )

        target_guid = link.target_document_guid
        if not self.accessor.exists(target_guid):
            return DoorValidationError(
                DoorErrorType.UNRESOLVED_TARGET_DOCUMENT,
                f"Door '{door.door_id}' points to missing document GUID '{target_guid}'.",
                ref,
            )

        target_path = self.accessor.resolve_path(target_guid)
        if not self._document_contains_door(target_guid, link.target_door_id):
            return DoorValidationError(
                DoorErrorType.UNRESOLVED_TARGET_DOOR,
                f"Door '{door.door_id}' points to missing target door '{link.target_door_id}' "
                f"in document '{target_path or target_guid}'.",
                ref,
            )
        return None

    def _document_contains_door(self, guid: str, door_id: str) -> bool:
        try:
            with self.accessor.using_document(guid) as target:
                return target.find_door(door_id) is not None
        except DoorLinkError as e:
            # An unreadable target counts as a missing target door.
            log_exception_once(logger, "warning", "Could not open link target", exc=e, document_guid=guid)
            return False


def validate_document(document: Document, accessor: DocumentAccessor) -> list[DoorValidationError]:
    """Convenience wrapper around GraphValidator(accessor).validate(document)."""
    return GraphValidator(accessor).validate(document)
