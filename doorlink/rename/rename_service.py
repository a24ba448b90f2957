"""
Door id rename with reference propagation.

The new id is checked for format and uniqueness before anything is touched;
a rejected rename changes nothing. The door's own id is committed through
the undo history only after every propagation pass has run to completion.
"""

from ..cancellation import CancellationToken
from ..doors.authoring import DEFAULT_GENERATED_LENGTH, is_door_id_unique
from ..doors.identity import generate_id, is_valid_id
from ..exceptions import DocumentNotFoundError, DuplicateNewIdError, InvalidNewIdError, create_error_context
from ..models import Document, Door
from ..persistence.accessor import DocumentAccessor
from ..structured_logging.enhanced_logging_config import get_logger
from .reference_renamer import ProgressCallback, ReferenceRenamer, RenameReport
from .undo import RenameDoorAction, UndoHistory

logger = get_logger(__name__)


class DoorRenameService:
    """Operator-facing rename of a single door."""

    def __init__(
        self,
        accessor: DocumentAccessor,
        renamer: ReferenceRenamer,
        history: UndoHistory | None = None,
        suggestion_length: int = DEFAULT_GENERATED_LENGTH,
    ):
        self.accessor = accessor
        self.renamer = renamer
        self.history = history or UndoHistory()
        self.suggestion_length = suggestion_length

    def suggest_id(self) -> str:
        """Random id offered to the operator."""
        return generate_id(self.suggestion_length)

    def rename(
        self,
        document: Document,
        door: Door,
        new_id: str | None,
        *,
        full_sweep: bool = True,
        cancel_token: CancellationToken | None = None,
        progress: ProgressCallback | None = None,
        show_progress: bool = False,
    ) -> RenameReport:
        """
        Rename a door and update every link that referenced it.

        Args:
            document: Open document containing the door
            door: Door to rename
            new_id: Requested id (surrounding whitespace is ignored)
            full_sweep: Also rewrite documents that are not open
            cancel_token: Cancels the on-disk sweep between documents
            progress: Sweep progress callback
            show_progress: Whether to show a progress bar for the sweep

        Returns:
            RenameReport; `committed` is False for a no-op or a cancelled sweep

        Raises:
            InvalidNewIdError: new_id does not match the id grammar
            DuplicateNewIdError: Another door in the document uses new_id
            DocumentNotFoundError: The document is not open or has no guid
        """
        new_id = (new_id or "").strip()
        old_id = door.door_id
        context = create_error_context(document_guid=document.guid, door_id=old_id, operation="rename_door")

        if not is_valid_id(new_id):
            raise InvalidNewIdError(new_id, context=context)

        if not document.guid.strip() or self.accessor.get_open(document.guid) is not document:
            raise DocumentNotFoundError(
                "Door is not in a valid open document.", context=context, guid=document.guid or None
            )

        if not any(candidate is door for candidate in document.doors()):
            raise ValueError(f"Door '{old_id}' is not part of document {document.guid}")

        if new_id == old_id:
            return RenameReport(target_document_guid=document.guid, old_id=old_id, new_id=new_id)

        if not is_door_id_unique(document, new_id, except_door=door):
            raise DuplicateNewIdError(new_id, context=context)

        logger.info("Renaming door", document_guid=document.guid, old_id=old_id, new_id=new_id, full_sweep=full_sweep)
        report = self.renamer.propagate(
            document.guid,
            old_id,
            new_id,
            full_sweep=full_sweep,
            cancel_token=cancel_token,
            progress=progress,
            show_progress=show_progress,
        )

        if report.cancelled:
            logger.warning(
                "Door id not committed; reference sweep was cancelled",
                document_guid=document.guid,
                old_id=old_id,
                new_id=new_id,
            )
            return report

        self.history.record(RenameDoorAction(document=document, door=door, old_id=old_id, new_id=new_id))
        self.accessor.mark_dirty(document)
        report.committed = True
        logger.info("Door renamed", document_guid=document.guid, links_changed=report.total_links_changed)
        return report
