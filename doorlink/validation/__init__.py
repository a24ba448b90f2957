"""Door graph validation and the gates that run it."""

from .gates import BuildGate, PreRunGate, validate_open_documents
from .graph_validator import DoorRef, DoorValidationError, GraphValidator, validate_document

__all__ = [
    "BuildGate",
    "DoorRef",
    "DoorValidationError",
    "GraphValidator",
    "PreRunGate",
    "validate_document",
    "validate_open_documents",
]
