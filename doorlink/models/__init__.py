"""Data models for documents, templates and doors."""

from .document import Document, Entity, EntityContainer, Template
from .door import Capability, DocumentRef, Door, DoorLink, Prop, TemplateSource, Vector2

__all__ = [
    "Capability",
    "Document",
    "DocumentRef",
    "Door",
    "DoorLink",
    "Entity",
    "EntityContainer",
    "Prop",
    "Template",
    "TemplateSource",
    "Vector2",
]
