"""
Door entity and link value types.

A Door carries a stable id, unique within its document, and a DoorLink to a
door in another (or the same) document. Field aliases are the persisted
camelCase names.
"""

from enum import Flag, auto
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr


class Capability(Flag):
    """What an entity supports when an actor interacts with it."""

    NONE = 0
    INTERACTABLE = auto()
    TRAVEL = auto()


class Vector2(BaseModel):
    """2D position in document space."""

    model_config = ConfigDict(frozen=True)

    x: float = 0.0
    y: float = 0.0


class DocumentRef(BaseModel):
    """
    Reference to a document asset.

    The guid is the primary identifier and survives moves and renames. The
    cached path is advisory only and may go stale.
    """

    model_config = ConfigDict(frozen=True)

    document_guid: str = ""
    cached_path: str = ""

    def is_empty(self) -> bool:
        """True if no document is assigned."""
        return not self.document_guid.strip()


class DoorLink(BaseModel):
    """Destination of a door: a door id inside a target document."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="forbid")

    target_document_guid: str = Field(default="", alias="targetDocumentGuid")
    target_document_path_cache: str = Field(default="", alias="targetDocumentPathCache")
    target_door_id: str = Field(default="", alias="targetDoorId")

    @property
    def target_document(self) -> DocumentRef:
        return DocumentRef(document_guid=self.target_document_guid, cached_path=self.target_document_path_cache)

    def is_empty(self) -> bool:
        """True if neither a target document nor a target door is set."""
        return not self.target_document_guid.strip() and not self.target_door_id.strip()

    def points_to(self, document_guid: str, door_id: str) -> bool:
        """Ordinal comparison against a (document guid, door id) pair."""
        return self.target_document_guid == document_guid and self.target_door_id == door_id


class TemplateSource(BaseModel):
    """Where a template instance came from: template path and entity index."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path: str
    entity_index: int = Field(default=0, alias="entityIndex")


class Door(BaseModel):
    """
    A door entity inside a document or template.

    The id is not edited directly by authoring code; renames go through
    DoorRenameService so references elsewhere are updated.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True, extra="forbid")

    kind: Literal["door"] = "door"
    name: str = "Door"
    door_id: str = Field(default="", alias="doorId")
    link: DoorLink = Field(default_factory=DoorLink)
    position: Vector2 = Field(default_factory=Vector2)
    entry_anchor: Vector2 | None = Field(default=None, alias="entryAnchor")
    template: TemplateSource | None = None

    _capabilities: Capability = PrivateAttr(default=Capability.NONE)

    def model_post_init(self, __context: Any) -> None:
        self._capabilities = Capability.INTERACTABLE | Capability.TRAVEL

    @property
    def capabilities(self) -> Capability:
        return self._capabilities

    def entry_position(self) -> Vector2:
        """Entry anchor if one is set, otherwise the door's own position."""
        if self.entry_anchor is not None:
            return self.entry_anchor
        return self.position


class Prop(BaseModel):
    """A non-door entity. Interactable props respond to the interact action."""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    kind: Literal["prop"] = "prop"
    name: str = "Prop"
    position: Vector2 = Field(default_factory=Vector2)
    interactable: bool = False

    _capabilities: Capability = PrivateAttr(default=Capability.NONE)

    def model_post_init(self, __context: Any) -> None:
        # Resolved once; later edits to `interactable` do not change it.
        self._capabilities = Capability.INTERACTABLE if self.interactable else Capability.NONE

    @property
    def capabilities(self) -> Capability:
        return self._capabilities
