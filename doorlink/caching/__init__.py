"""Caching: TTL LRU cache and the per-document door index."""

from .door_index import DoorInfo, SceneDoorIndex
from .lru_cache import LRUCache

__all__ = ["DoorInfo", "LRUCache", "SceneDoorIndex"]
