"""
Exception hierarchy for doorlink.

Validator findings are never raised; they are returned as data (see
error_types.DoorErrorType). The exceptions below cover operations that must
stop: rename rejections, unreadable documents, and the packaging and pre-run
gates.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class ErrorContext:
    """Contextual information attached to every DoorLinkError."""

    document_guid: str | None = None
    door_id: str | None = None
    operation: str | None = None
    timestamp: datetime = field(default_factory=datetime.now)
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert context to dictionary for logging."""
        return {
            "document_guid": self.document_guid,
            "door_id": self.door_id,
            "operation": self.operation,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class DoorLinkError(Exception):
    """
    Base exception for all doorlink errors.

    Carries structured context and a user-facing message. The error logs
    itself once on construction.
    """

    def __init__(
        self,
        message: str,
        context: ErrorContext | None = None,
        details: dict[str, Any] | None = None,
        user_friendly: str | None = None,
    ):
        """
        Initialize doorlink error.

        Args:
            message: Technical error message
            context: Error context information
            details: Additional error details
            user_friendly: Message suitable for an operator dialog
        """
        super().__init__(message)
        self.message = message
        self.context = context or ErrorContext()
        self.details = details or {}
        self.user_friendly = user_friendly or message
        self.timestamp = datetime.now()
        self.already_logged = False

        self._log_error()

    def _log_error(self) -> None:
        """Log the error with structured context."""
        logger.error(
            "doorlink error occurred",
            error_type=self.__class__.__name__,
            message=self.message,
            context=self.context.to_dict(),
            details=self.details,
        )
        self.already_logged = True

    def mark_logged(self) -> None:
        self.already_logged = True

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for reporting."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "user_friendly": self.user_friendly,
            "context": self.context.to_dict(),
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


class InvalidNewIdError(DoorLinkError):
    """Rename rejected: the new id does not match the door id grammar."""

    def __init__(self, new_id: str, context: ErrorContext | None = None, **kwargs):
        super().__init__(
            f"Invalid door id '{new_id}'. Allowed [0-9a-zA-Z_-], length 1..64.",
            context,
            user_friendly="Allowed: [0-9a-zA-Z_-], length 1..64.",
            **kwargs,
        )
        self.new_id = new_id
        self.details["new_id"] = new_id


class DuplicateNewIdError(DoorLinkError):
    """Rename rejected: another door in the same document already uses the id."""

    def __init__(self, new_id: str, context: ErrorContext | None = None, **kwargs):
        super().__init__(
            f"Door id '{new_id}' already exists in the same document.",
            context,
            user_friendly="This ID already exists in the same document.",
            **kwargs,
        )
        self.new_id = new_id
        self.details["new_id"] = new_id


class DocumentNotFoundError(DoorLinkError):
    """A document guid or path could not be resolved where one is required."""

    def __init__(self, message: str, context: ErrorContext | None = None, guid: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.guid = guid
        if guid:
            self.details["guid"] = guid


class DocumentLoadError(DoorLinkError):
    """A document or template file is unreadable or malformed."""

    def __init__(self, message: str, context: ErrorContext | None = None, path: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.path = path
        if path:
            self.details["path"] = path


class BuildGateError(DoorLinkError):
    """Packaging aborted because door validation reported errors."""

    def __init__(self, message: str, error_count: int, context: ErrorContext | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.error_count = error_count
        self.details["error_count"] = error_count


class PreRunGateRejected(DoorLinkError):
    """Entering running mode was cancelled because open documents have door errors."""

    def __init__(self, errors: list[Any], context: ErrorContext | None = None, **kwargs):
        super().__init__(
            f"Door validation failed for open documents ({len(errors)} errors); run cancelled.",
            context,
            user_friendly="Fix door errors in open documents before entering run mode.",
            **kwargs,
        )
        self.errors = list(errors)
        self.details["error_count"] = len(self.errors)


class ConfigurationError(DoorLinkError):
    """Configuration and setup errors."""

    def __init__(self, message: str, context: ErrorContext | None = None, config_key: str | None = None, **kwargs):
        super().__init__(message, context, **kwargs)
        self.config_key = config_key
        if config_key:
            self.details["config_key"] = config_key


def create_error_context(**kwargs) -> ErrorContext:
    """
    Create an error context with the given parameters.

    Args:
        **kwargs: Context parameters

    Returns:
        ErrorContext object
    """
    return ErrorContext(**kwargs)
