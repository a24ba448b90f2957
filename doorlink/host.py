"""
Authoring host mode tracking.

The host moves between editing and running modes. Entering running mode runs
the registered pre-run hooks first; a hook that raises PreRunGateRejected
cancels the transition and the host stays in editing mode. Leaving running
mode runs the exit hooks while the host reports EXITING_RUN.
"""

from collections.abc import Callable
from enum import Enum

from .exceptions import PreRunGateRejected
from .structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)


class HostMode(str, Enum):
    """Modes of the authoring host."""

    EDITING = "editing"
    ENTERING_RUN = "entering_run"
    RUNNING = "running"
    EXITING_RUN = "exiting_run"


class AuthoringHost:
    """Holds the current mode and the hooks run before entering running mode."""

    def __init__(self) -> None:
        self.mode = HostMode.EDITING
        self.last_rejection: PreRunGateRejected | None = None
        self._pre_run_hooks: list[Callable[[], None]] = []
        self._exit_hooks: list[Callable[[], None]] = []

    @property
    def is_running_or_transitioning(self) -> bool:
        """True in every mode other than EDITING."""
        return self.mode is not HostMode.EDITING

    def add_pre_run_hook(self, hook: Callable[[], None]) -> None:
        self._pre_run_hooks.append(hook)

    def add_exit_hook(self, hook: Callable[[], None]) -> None:
        self._exit_hooks.append(hook)

    def enter_run_mode(self) -> bool:
        """
        Request the transition into running mode.

        Returns:
            True if the host is now running, False if a pre-run hook rejected it
        """
        if self.mode is not HostMode.EDITING:
            return self.mode is HostMode.RUNNING

        self.mode = HostMode.ENTERING_RUN
        self.last_rejection = None
        try:
            for hook in list(self._pre_run_hooks):
                hook()
        except PreRunGateRejected as rejection:
            self.mode = HostMode.EDITING
            self.last_rejection = rejection
            logger.warning("Run mode transition cancelled", errors=len(rejection.errors))
            return False
        except Exception:
            self.mode = HostMode.EDITING
            logger.error("Pre-run hook failed; staying in editing mode", exc_info=True)
            raise

        self.mode = HostMode.RUNNING
        logger.info("Entered run mode")
        return True

    def exit_run_mode(self) -> None:
        """
        Leave running mode.

        Exit hooks run while the mode is EXITING_RUN. The host returns to
        EDITING even when a hook raises; the error is propagated.
        """
        if self.mode is HostMode.EDITING:
            return
        self.mode = HostMode.EXITING_RUN
        try:
            for hook in list(self._exit_hooks):
                hook()
        finally:
            self.mode = HostMode.EDITING
            logger.info("Returned to editing mode")
