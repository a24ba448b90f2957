"""
Gating hooks that run door validation.

BuildGate validates every document in the project before packaging and fails
hard on any finding. PreRunGate validates the open documents right before the
host enters running mode and rejects the transition on any finding; it can
be toggled off through user preferences.
"""

from tqdm import tqdm

from ..exceptions import BuildGateError, DoorLinkError, PreRunGateRejected
from ..host import AuthoringHost
from ..persistence.accessor import DocumentAccessor
from ..preferences import VALIDATION_ON_RUN_KEY, UserPreferences
from ..structured_logging.enhanced_logging_config import get_logger
from .graph_validator import DoorValidationError, GraphValidator

logger = get_logger(__name__)


def validate_open_documents(
    accessor: DocumentAccessor, validator: GraphValidator | None = None
) -> list[DoorValidationError]:
    """
    Validate every document open in the authoring session.

    Each finding is logged at error level; a clean run logs a single OK line.
    """
    validator = validator or GraphValidator(accessor)
    errors = validator.validate_many(accessor.open_documents())

    for error in errors:
        logger.error(error.message, error_type=error.error_type.value, **error.door.to_dict())
    if not errors:
        logger.info("Doors validation: OK (open documents)")
    return errors


class BuildGate:
    """Fails packaging when any document in the project has door errors."""

    def __init__(self, accessor: DocumentAccessor, validator: GraphValidator | None = None):
        """
        Initialize the build gate.

        Args:
            accessor: Document accessor covering the whole project
            validator: Validator to use (one is created if None)
        """
        self.accessor = accessor
        self.validator = validator or GraphValidator(accessor)

    def run(self, show_progress: bool = False) -> int:
        """
        Validate every reachable document.

        Args:
            show_progress: Whether to show a progress bar

        Returns:
            Number of documents validated

        Raises:
            BuildGateError: At least one error was found
        """
        logger.info("Build gate: running")
        self.accessor.store.refresh()
        lines: list[str] = [f"{path}: {message}" for path, message in self.accessor.store.parsing_errors]

        guids = self.accessor.all_document_guids()
        documents_to_process = tqdm(guids, desc="Validating documents") if show_progress else guids

        validated = 0
        for guid in documents_to_process:
            try:
                with self.accessor.using_document(guid) as document:
                    errors = self.validator.validate(document)
            except DoorLinkError as e:
                lines.append(f"Could not load document '{guid}': {e.message}")
                continue
            validated += 1
            lines.extend(error.message for error in errors)

        if lines:
            message = f"Doors validation failed ({len(lines)} errors):\n" + "\n".join(lines)
            raise BuildGateError(message, error_count=len(lines))

        logger.info("Build gate: passed", documents=validated)
        return validated


class PreRunGate:
    """Rejects entering running mode while open documents have door errors."""

    def __init__(
        self,
        accessor: DocumentAccessor,
        preferences: UserPreferences,
        validator: GraphValidator | None = None,
    ):
        self.accessor = accessor
        self.preferences = preferences
        self.validator = validator or GraphValidator(accessor)

    @property
    def enabled(self) -> bool:
        return self.preferences.get_bool(VALIDATION_ON_RUN_KEY, True)

    def set_enabled(self, enabled: bool) -> None:
        self.preferences.set_bool(VALIDATION_ON_RUN_KEY, enabled)

    def toggle(self) -> bool:
        """Flip the persisted toggle and return the new value."""
        enabled = not self.enabled
        self.set_enabled(enabled)
        return enabled

    def check(self) -> None:
        """
        Validate open documents when the gate is enabled.

        Raises:
            PreRunGateRejected: At least one open document has door errors
        """
        if not self.enabled:
            return

        errors = validate_open_documents(self.accessor, self.validator)
        if errors:
            raise PreRunGateRejected(errors)

    def install(self, host: AuthoringHost) -> None:
        """Register the gate as a pre-run hook of the host."""
        host.add_pre_run_hook(self.check)
