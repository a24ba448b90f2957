"""
Document and template models.

A document is a persisted level containing a heterogeneous entity list. A
template is a reusable entity definition instanced into many documents.
"""

from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from .door import Door, Prop

Entity = Annotated[Door | Prop, Field(discriminator="kind")]


class EntityContainer(BaseModel):
    """Shared behavior of documents and templates."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    entities: list[Entity] = Field(default_factory=list)
    path: Path | None = Field(default=None, exclude=True)

    def doors(self) -> list[Door]:
        """All doors in encounter order."""
        return [entity for entity in self.entities if isinstance(entity, Door)]

    def find_door(self, door_id: str) -> Door | None:
        """First door whose id equals door_id (ordinal), or None."""
        if not door_id:
            return None
        for door in self.doors():
            if door.door_id == door_id:
                return door
        return None

    def door(self, door_id: str) -> Door:
        """
        Door with the given id.

        Raises:
            KeyError: No door with that id exists
        """
        found = self.find_door(door_id)
        if found is None:
            raise KeyError(door_id)
        return found

    def to_json_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class Document(EntityContainer):
    """A level document identified by a stable guid."""

    guid: str
    dirty: bool = Field(default=False, exclude=True)

    @property
    def display_path(self) -> str:
        return str(self.path) if self.path else f"<unsaved:{self.guid}>"

    def to_json_dict(self) -> dict:
        """Persisted form with the guid first."""
        return {"guid": self.guid, **super().to_json_dict()}


class Template(EntityContainer):
    """A reusable entity definition. Door ids inside templates stay empty."""

    @property
    def display_path(self) -> str:
        return str(self.path) if self.path else f"<unsaved template:{self.name}>"
