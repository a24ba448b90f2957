"""
Template repository.

Templates are edited by loading their contents, modifying them, saving
immediately, and unloading. There is no dirty-but-unsaved state for
templates.
"""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from ..doors.authoring import sanitize_template
from ..exceptions import DoorLinkError
from ..models import Door, Template, TemplateSource
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once
from .project_store import ProjectStore

logger = get_logger(__name__)


class TemplateRepository:
    """Access to every template asset in the project."""

    def __init__(self, store: ProjectStore):
        self.store = store

    def template_paths(self) -> list[Path]:
        return self.store.discover_template_paths()

    @contextmanager
    def editing(self, path: str | Path) -> Iterator[Template]:
        """
        Load a template's contents for the duration of the block.

        Raises:
            DocumentLoadError: The template file cannot be read
        """
        # Unsaved modifications are discarded with the loaded contents.
        yield self.store.load_template(path)

    def save(self, template: Template) -> Path:
        """Persist a template immediately, clearing any door ids it carries."""
        sanitize_template(template)
        return self.store.save_template(template)

    def resolve_door(self, source: TemplateSource) -> Door | None:
        """Template door referenced by an instance, or None if it cannot be found."""
        path = Path(source.path)
        if not path.is_absolute():
            path = self.store.root / path
        if not path.exists():
            return None

        try:
            with self.editing(path) as template:
                if 0 <= source.entity_index < len(template.entities):
                    entity = template.entities[source.entity_index]
                    if isinstance(entity, Door):
                        return entity.model_copy()
        except DoorLinkError as e:
            log_exception_once(logger, "warning", "Template door could not be resolved", exc=e, path=str(path))
        return None
