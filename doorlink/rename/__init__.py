"""Door id rename and reference propagation."""

from .reference_renamer import ReferenceRenamer, RenameReport, SweepReport, replace_in_container
from .rename_service import DoorRenameService
from .undo import RenameDoorAction, UndoHistory

__all__ = [
    "DoorRenameService",
    "ReferenceRenamer",
    "RenameDoorAction",
    "RenameReport",
    "SweepReport",
    "UndoHistory",
    "replace_in_container",
]
