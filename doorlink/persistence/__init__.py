"""Persistence: project store, document accessor and template repository."""

from .accessor import DocumentAccessor
from .project_store import ProjectStore
from .templates import TemplateRepository

__all__ = ["DocumentAccessor", "ProjectStore", "TemplateRepository"]
