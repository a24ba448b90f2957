"""
Document accessor for the authoring session.

Tracks which documents are open in the authoring environment and gives
scoped access to any document by guid: open-if-not-already-loaded, use,
then close only if it was opened here. Every transient open is released on
every exit path, including errors.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path

from ..exceptions import DocumentNotFoundError, create_error_context
from ..models import Document, Door
from ..structured_logging.enhanced_logging_config import get_logger
from .project_store import ProjectStore

logger = get_logger(__name__)


class DocumentAccessor:
    """
    Open/iterate/close access to documents.

    Durability differs by domain: open documents are only marked dirty and
    saved when the operator asks; transiently opened documents are saved
    explicitly by the caller before they are released.
    """

    def __init__(self, store: ProjectStore):
        """
        Initialize the accessor.

        Args:
            store: Project store backing on-disk documents
        """
        self.store = store
        self._open: dict[str, Document] = {}
        self._transient: dict[str, int] = {}
        self._reference_listeners: list[Callable[[], None]] = []

    # Open documents

    def open_documents(self) -> list[Document]:
        """Documents currently open in the authoring session, in open order."""
        return list(self._open.values())

    def is_open(self, guid: str) -> bool:
        return guid in self._open

    def get_open(self, guid: str) -> Document | None:
        return self._open.get(guid)

    def open(self, guid: str) -> Document:
        """
        Open a document in the authoring session.

        Raises:
            DocumentNotFoundError: The guid does not resolve to a document
            DocumentLoadError: The document file cannot be read
        """
        if guid in self._open:
            return self._open[guid]

        document = self._load(guid)
        self._open[guid] = document
        logger.info("Document opened", document_guid=guid, path=str(document.path))
        return document

    def add_open(self, document: Document) -> Document:
        """Register an in-memory (possibly unsaved) document as open."""
        self._open[document.guid] = document
        return document

    def close(self, guid: str) -> None:
        """Close an open document, discarding unsaved changes."""
        document = self._open.pop(guid, None)
        if document is not None and document.dirty:
            logger.warning("Closed document with unsaved changes", document_guid=guid)

    def mark_dirty(self, document: Document) -> None:
        document.dirty = True

    def save(self, document: Document) -> Path:
        """Persist a document and clear its dirty flag."""
        return self.store.save_document(document)

    def save_open_documents(self) -> int:
        """Save every dirty open document. Returns the number saved."""
        saved = 0
        for document in self.open_documents():
            if document.dirty:
                self.save(document)
                saved += 1
        return saved

    # Resolution

    def resolve_path(self, guid: str) -> Path | None:
        """Path of a document by guid, preferring the open copy."""
        document = self._open.get(guid)
        if document is not None and document.path is not None:
            return document.path
        return self.store.resolve_path(guid)

    def exists(self, guid: str) -> bool:
        """True if the guid names an open document or a document on disk."""
        if not guid or not guid.strip():
            return False
        return guid in self._open or self.store.resolve_path(guid) is not None

    def all_document_guids(self) -> list[str]:
        """Every document guid in the project, including open unsaved documents."""
        guids = set(self.store.document_guids())
        guids.update(self._open)
        return sorted(guids)

    # Scoped access

    def _load(self, guid: str) -> Document:
        path = self.store.resolve_path(guid)
        if path is None:
            context = create_error_context(document_guid=guid, operation="open_document")
            raise DocumentNotFoundError(f"No document with guid '{guid}'", context=context, guid=guid)
        return self.store.load_document(path)

    @contextmanager
    def using_document(self, guid: str) -> Iterator[Document]:
        """
        Scoped access to a document by guid.

        Yields the open copy when the document is already open; otherwise the
        document is loaded transiently and released when the block exits.

        Raises:
            DocumentNotFoundError: The guid does not resolve to a document
            DocumentLoadError: The document file cannot be read
        """
        document = self._open.get(guid)
        if document is not None:
            yield document
            return

        document = self._load(guid)
        self._transient[guid] = self._transient.get(guid, 0) + 1
        try:
            yield document
        finally:
            remaining = self._transient[guid] - 1
            if remaining:
                self._transient[guid] = remaining
            else:
                del self._transient[guid]

    @property
    def transient_open_count(self) -> int:
        """Number of transient opens not yet released."""
        return sum(self._transient.values())

    # Link assignment

    def add_reference_listener(self, listener: Callable[[], None]) -> None:
        """Register a callback fired whenever a door's document reference is reassigned."""
        self._reference_listeners.append(listener)

    def assign_link(self, document: Document, door: Door, target_guid: str, target_door_id: str) -> None:
        """
        Point a door at (target_guid, target_door_id).

        The advisory path cache is refreshed from the project database. The
        link is not checked for existence here; that is the validator's job.
        """
        path = self.resolve_path(target_guid) if target_guid else None
        door.link.target_document_guid = target_guid
        door.link.target_document_path_cache = str(path) if path else ""
        door.link.target_door_id = target_door_id
        self.mark_dirty(document)

        for listener in list(self._reference_listeners):
            listener()
