"""Door identity rules and authoring operations."""

from .authoring import (
    authoring_pass,
    ensure_door_id,
    instantiate_template,
    is_door_id_unique,
    new_door_id,
    sanitize_template,
)
from .identity import ALPHABET, MAX_LENGTH, MIN_LENGTH, generate_id, is_valid_id

__all__ = [
    "ALPHABET",
    "MAX_LENGTH",
    "MIN_LENGTH",
    "authoring_pass",
    "ensure_door_id",
    "generate_id",
    "instantiate_template",
    "is_door_id_unique",
    "is_valid_id",
    "new_door_id",
    "sanitize_template",
]
