"""
structlog-based logging configuration for doorlink.

Every module obtains its logger through get_logger(__name__). The authoring
tools, the CLI and the runtime travel resolver all share one configuration,
installed by configure_enhanced_structlog() or setup_enhanced_logging().
"""

import logging
import os
import re
import sys
from typing import Any, cast

import structlog
from structlog.contextvars import merge_contextvars
from structlog.stdlib import BoundLogger, LoggerFactory

logger = structlog.get_logger(__name__)

VALID_ENVIRONMENTS = ("unit_test", "local", "ci", "production")

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


class _LoggingState:  # pylint: disable=too-few-public-methods  # Reason: state container, avoids global statements
    """State container for logging initialization."""

    initialized: bool = False
    environment: str | None = None


_logging_state = _LoggingState()


def detect_environment() -> str:
    """
    Detect the current environment.

    Returns:
        Environment name: "unit_test", "ci", "local" or "production"
    """
    if "pytest" in sys.modules:
        return "unit_test"

    env = os.getenv("DOORLINK_LOGGING_ENVIRONMENT", "")
    if env in VALID_ENVIRONMENTS:
        return env

    if os.getenv("CI"):
        return "ci"

    return "local"


def strip_ansi_renderer(bound_logger: Any, name: str, event_dict: dict[str, Any]) -> str:
    """Render key/value output with ANSI escape sequences removed."""
    try:
        formatted = structlog.processors.KeyValueRenderer(key_order=["event"])(bound_logger, name, event_dict)
        return _ANSI_ESCAPE.sub("", formatted)
    except Exception as e:  # pylint: disable=broad-exception-caught  # Reason: a failing renderer must never crash the caller
        return f"Logging renderer error: {type(e).__name__}: {str(e)}"


def configure_enhanced_structlog(
    environment: str | None = None,
    log_level: str = "INFO",
    stream: Any = None,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Args:
        environment: Environment name (auto-detected if None)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        stream: Output stream for log lines (stderr if None)
    """
    if environment is None:
        environment = detect_environment()

    level = logging.getLevelName(log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level)

    structlog.configure(
        processors=[
            merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            strip_ansi_renderer,
        ],
        context_class=dict,
        logger_factory=LoggerFactory(),
        wrapper_class=BoundLogger,
        cache_logger_on_first_use=False,
    )

    _logging_state.initialized = True
    _logging_state.environment = environment

    configured_logger = structlog.get_logger(__name__)
    configured_logger.debug("structlog configured", environment=environment, log_level=log_level)


def setup_enhanced_logging(config: Any, *, force_reconfigure: bool = False) -> None:
    """
    Set up logging from the application configuration.

    Args:
        config: AppConfig instance (only its `logging` section is read)
        force_reconfigure: When True, reconfigure even if logging is initialized
    """
    if _logging_state.initialized and not force_reconfigure:
        logger.debug("setup_enhanced_logging skipped; logging already initialized")
        return

    logging_config = config.logging
    configure_enhanced_structlog(logging_config.environment or None, logging_config.level)


def get_logger(name: str) -> Any:  # Returns BoundLogger but typed as Any for flexibility
    """
    Get a structlog logger with the specified name.

    This is the public API for obtaining loggers; application code should not
    call structlog.get_logger() directly.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def log_exception_once(
    bound_logger: BoundLogger,
    level: str,
    message: str,
    *,
    exc: Exception | None = None,
    mark_logged: bool = True,
    **kwargs: Any,
) -> None:
    """
    Log an exception once, respecting exceptions that have already been logged.

    Args:
        bound_logger: structlog bound logger instance.
        level: Logging level to use (for example, "error" or "warning").
        message: Log message to emit.
        exc: Optional exception to include in the log entry.
        mark_logged: When True, mark the exception as logged to prevent duplicates.
        **kwargs: Additional key-value pairs for structured logging.
    """
    if exc is not None:
        if getattr(exc, "already_logged", False):
            return
        kwargs.setdefault("error_type", type(exc).__name__)
        kwargs.setdefault("error", str(exc))

    log_method = getattr(bound_logger, level.lower(), bound_logger.error)
    log_method(message, **kwargs)

    if exc is not None and mark_logged:
        marker = getattr(exc, "mark_logged", None)
        if callable(marker):
            marker()  # pylint: disable=not-callable
        else:
            cast(Any, exc).already_logged = True
