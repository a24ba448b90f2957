"""
Authoring-time door operations.

Covers the id assignment pass run when doors are authored, duplicated or
instanced from a template, the per-document uniqueness check used before a
rename, and link assignment.
"""

from collections.abc import Callable

from ..models import Document, Door, EntityContainer, Template, TemplateSource
from ..structured_logging.enhanced_logging_config import get_logger
from .identity import generate_id

logger = get_logger(__name__)

DEFAULT_GENERATED_LENGTH = 5
DEFAULT_GENERATED_PREFIX = "Door_"


def new_door_id(prefix: str = DEFAULT_GENERATED_PREFIX, length: int = DEFAULT_GENERATED_LENGTH) -> str:
    return f"{prefix}{generate_id(length)}"


def sanitize_template(template: Template) -> int:
    """
    Clear every door id stored in a template.

    Instances would otherwise inherit the same id across documents.

    Returns:
        Number of doors whose id was cleared
    """
    cleared = 0
    for door in template.doors():
        if door.door_id:
            door.door_id = ""
            cleared += 1
    if cleared:
        logger.debug("Cleared door ids stored in template", template=template.display_path, cleared=cleared)
    return cleared


def ensure_door_id(
    door: Door,
    template_door_id: str | None = None,
    *,
    prefix: str = DEFAULT_GENERATED_PREFIX,
    length: int = DEFAULT_GENERATED_LENGTH,
) -> bool:
    """
    Assign a fresh id to a door that has none or that still carries its template's id.

    Args:
        door: Door inside a document (not a template)
        template_door_id: Id stored on the template door this door was instanced from
        prefix: Prefix of the generated id
        length: Length of the random part

    Returns:
        True if the id was changed
    """
    inherited = template_door_id is not None and door.door_id == template_door_id
    if door.door_id.strip() and not inherited:
        return False

    door.door_id = new_door_id(prefix, length)
    return True


def authoring_pass(
    container: EntityContainer,
    template_loader: Callable[[TemplateSource], Door | None] | None = None,
    *,
    prefix: str = DEFAULT_GENERATED_PREFIX,
    length: int = DEFAULT_GENERATED_LENGTH,
) -> int:
    """
    Apply the id rules to every door of a document or template.

    Templates have their ids cleared; document doors get ensure_door_id. When
    the container is a Document that changed, it is flagged dirty.

    Args:
        container: Document or Template to process
        template_loader: Resolves a door's TemplateSource to the template door
        prefix: Prefix of generated ids
        length: Length of the random part of generated ids

    Returns:
        Number of doors changed
    """
    if isinstance(container, Template):
        return sanitize_template(container)

    changed = 0
    for door in container.doors():
        template_door_id = None
        if door.template is not None and template_loader is not None:
            template_door = template_loader(door.template)
            if template_door is not None:
                template_door_id = template_door.door_id
        if ensure_door_id(door, template_door_id, prefix=prefix, length=length):
            changed += 1

    if changed and isinstance(container, Document):
        container.dirty = True
        logger.info("Assigned door ids", document_guid=container.guid, changed=changed)
    return changed


def is_door_id_unique(container: EntityContainer, door_id: str, except_door: Door | None = None) -> bool:
    """True if no door other than except_door carries door_id."""
    for door in container.doors():
        if door is except_door:
            continue
        if door.door_id == door_id:
            return False
    return True


def instantiate_template(template: Template, document: Document, entity_index: int, **overrides) -> Door:
    """
    Copy a template door into a document.

    The copy keeps the template's stored id until the authoring pass replaces it.

    Raises:
        IndexError: entity_index is not a door of the template
    """
    source = template.entities[entity_index]
    if not isinstance(source, Door):
        raise IndexError(f"Template entity {entity_index} is not a door")

    instance = source.model_copy(deep=True, update=overrides)
    instance.template = TemplateSource(path=str(template.path or template.name), entity_index=entity_index)
    document.entities.append(instance)
    document.dirty = True
    return instance
