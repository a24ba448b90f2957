"""
Per-document door index for authoring tools.

Maps a document guid to the sorted list of (door id, label) pairs shown in
target-door dropdowns. Entries live for a fixed TTL; an expired entry is
rebuilt by opening the document transiently. The index is disabled while the
host is in (or entering) running mode.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass

from ..exceptions import DoorLinkError
from ..host import AuthoringHost
from ..persistence.accessor import DocumentAccessor
from ..structured_logging.enhanced_logging_config import get_logger, log_exception_once
from .lru_cache import LRUCache

logger = get_logger(__name__)

DEFAULT_TTL_SECONDS = 2.0


@dataclass(frozen=True)
class DoorInfo:
    """Dropdown entry describing a door in a document."""

    door_id: str
    label: str


class SceneDoorIndex:
    """TTL-cached listing of door ids per document guid."""

    def __init__(
        self,
        accessor: DocumentAccessor,
        host: AuthoringHost | None = None,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        max_documents: int = 256,
    ):
        """
        Initialize the door index.

        Args:
            accessor: Document accessor used to enumerate doors
            host: Authoring host; lookups return nothing while it is not editing
            ttl_seconds: Lifetime of a built entry
            clock: Time source in seconds
            max_documents: Maximum number of cached documents
        """
        self.accessor = accessor
        self.host = host
        self._cache: LRUCache[str, tuple[DoorInfo, ...]] = LRUCache(
            max_size=max_documents, ttl_seconds=ttl_seconds, clock=clock
        )
        self.rebuilds = 0
        accessor.add_reference_listener(self.invalidate_all)
        # A run may have edited documents behind the cache.
        if host is not None:
            host.add_exit_hook(self.invalidate_all)

    def get_doors(self, document_guid: str) -> list[DoorInfo]:
        """
        Doors of a document sorted by id (ordinal).

        Labels are formatted as "{door_id} ({object name})", with "<empty>" for
        a blank id. Returns an empty list for a blank guid, an unresolvable
        document, or while the host is running or entering running mode.
        """
        if not document_guid or not document_guid.strip():
            return []

        if self.host is not None and self.host.is_running_or_transitioning:
            return []

        return list(self._cache.get_or_set(document_guid, lambda: self._build(document_guid)))

    def invalidate_all(self) -> None:
        """Clear every cached entry."""
        self._cache.clear()

    def _build(self, document_guid: str) -> tuple[DoorInfo, ...]:
        self.rebuilds += 1
        try:
            with self.accessor.using_document(document_guid) as document:
                entries = [
                    DoorInfo(door_id=door.door_id, label=f"{door.door_id.strip() or '<empty>'} ({door.name})")
                    for door in document.doors()
                ]
        except DoorLinkError as e:
            log_exception_once(
                logger, "debug", "Door index could not open document", exc=e, document_guid=document_guid
            )
            return ()

        entries.sort(key=lambda info: info.door_id)
        logger.debug("Door index rebuilt", document_guid=document_guid, doors=len(entries))
        return tuple(entries)
