"""
Undo history for reversible authoring actions.

Only the door's own id change is recorded. Link updates made by the
reference sweep are not part of the action and are not reverted by undo.
"""

from dataclasses import dataclass
from typing import Protocol

from ..models import Document, Door
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class RecordedAction(Protocol):
    label: str

    def apply(self) -> None: ...

    def revert(self) -> None: ...


@dataclass
class RenameDoorAction:
    """Change of a single door's id inside its document."""

    document: Document
    door: Door
    old_id: str
    new_id: str
    label: str = "Change Door ID"

    def apply(self) -> None:
        self.door.door_id = self.new_id
        self.document.dirty = True

    def revert(self) -> None:
        self.door.door_id = self.old_id
        self.document.dirty = True


class UndoHistory:
    """Linear undo/redo stacks."""

    def __init__(self, limit: int = 100):
        self.limit = limit
        self._undo: list[RecordedAction] = []
        self._redo: list[RecordedAction] = []

    def record(self, action: RecordedAction) -> None:
        """Apply an action and push it onto the undo stack."""
        action.apply()
        self._undo.append(action)
        if len(self._undo) > self.limit:
            self._undo.pop(0)
        self._redo.clear()
        logger.debug("Action recorded", label=action.label)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def undo(self) -> RecordedAction | None:
        if not self._undo:
            return None
        action = self._undo.pop()
        action.revert()
        self._redo.append(action)
        logger.debug("Action undone", label=action.label)
        return action

    def redo(self) -> RecordedAction | None:
        if not self._redo:
            return None
        action = self._redo.pop()
        action.apply()
        self._undo.append(action)
        logger.debug("Action redone", label=action.label)
        return action
