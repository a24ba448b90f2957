"""
Cooperative cancellation.

Long-running loops (the on-disk rename sweep) and the travel state machine
check a CancellationToken between steps. Nothing is interrupted mid-step.
"""

from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class OperationCancelledError(Exception):
    """Raised by CancellationToken.raise_if_cancelled()."""


class CancellationToken:
    """Flag set by the operator and polled by the worker."""

    def __init__(self) -> None:
        self._cancelled = False
        self.reason: str | None = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self, reason: str | None = None) -> None:
        if not self._cancelled:
            self._cancelled = True
            self.reason = reason
            logger.info("Cancellation requested", reason=reason)

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise OperationCancelledError(self.reason or "Operation cancelled")
