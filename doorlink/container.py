"""
Authoring session container.

Wires the project store, document accessor, validator, renamer, door index
and gates for one project root. The CLI and the tests build their
collaborators through this class.
"""

from pathlib import Path

from .caching import SceneDoorIndex
from .config import AppConfig, get_config
from .doors.authoring import authoring_pass
from .host import AuthoringHost
from .models import Document, EntityContainer
from .persistence import DocumentAccessor, ProjectStore, TemplateRepository
from .preferences import UserPreferences
from .rename import DoorRenameService, ReferenceRenamer, UndoHistory
from .structured_logging.enhanced_logging_config import get_logger
from .validation import BuildGate, GraphValidator, PreRunGate

logger = get_logger(__name__)


class AuthoringSession:
    """All collaborators for one project, built from AppConfig."""

    def __init__(self, config: AppConfig | None = None, project_root: str | Path | None = None):
        """
        Build the session.

        Args:
            config: Application configuration (get_config() if None)
            project_root: Overrides config.project.root
        """
        self.config = config or get_config()
        root = Path(project_root) if project_root is not None else self.config.project.root

        self.store = ProjectStore(
            root,
            document_glob=self.config.project.document_glob,
            template_glob=self.config.project.template_glob,
        )
        self.accessor = DocumentAccessor(self.store)
        self.templates = TemplateRepository(self.store)
        self.host = AuthoringHost()
        self.preferences = UserPreferences(self.config.preferences.path)

        self.validator = GraphValidator(self.accessor)
        self.renamer = ReferenceRenamer(self.accessor, self.templates)
        self.history = UndoHistory()
        self.rename_service = DoorRenameService(
            self.accessor,
            self.renamer,
            self.history,
            suggestion_length=self.config.identity.generated_length,
        )
        self.door_index = SceneDoorIndex(self.accessor, self.host, ttl_seconds=self.config.index.ttl_seconds)
        self.build_gate = BuildGate(self.accessor, self.validator)
        self.pre_run_gate = PreRunGate(self.accessor, self.preferences, self.validator)
        self.pre_run_gate.install(self.host)

        logger.debug("Authoring session created", project_root=str(root))

    @property
    def project_root(self) -> Path:
        return self.store.root

    def run_authoring_pass(self, container: EntityContainer) -> int:
        """
        Apply the door id rules to a document or template.

        Blank ids and ids still inherited from a template are replaced with
        `<generated_prefix><random>`; template door ids are cleared.

        Returns:
            Number of doors changed
        """
        identity = self.config.identity
        return authoring_pass(
            container,
            self.templates.resolve_door,
            prefix=identity.generated_prefix,
            length=identity.generated_length,
        )

    def open_document(self, guid: str) -> Document:
        """
        Open a document and run the authoring pass on it.

        Raises:
            DocumentNotFoundError: The guid does not resolve to a document
            DocumentLoadError: The document file cannot be read
        """
        document = self.accessor.open(guid)
        self.run_authoring_pass(document)
        return document
