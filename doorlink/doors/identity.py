"""
Door id generation and format rules.

Allowed characters are [0-9a-zA-Z_-], length 1..64. Generated ids use the
lowercase alphanumeric alphabet and are not security sensitive; collisions
are caught by validation, not prevented here.
"""

import random
import re
import string

MIN_LENGTH = 1
MAX_LENGTH = 64

ALPHABET = string.digits + string.ascii_lowercase

DOOR_ID_PATTERN = re.compile(r"[0-9A-Za-z_-]{1,64}")

# Non-cryptographic RNG. Duplicates are caught by validation.
_random = random.Random()


def generate_id(length: int) -> str:
    """
    Generate a random door id.

    Args:
        length: Requested length, clamped to [MIN_LENGTH, MAX_LENGTH]

    Returns:
        Random id made of lowercase letters and digits
    """
    length = max(MIN_LENGTH, min(MAX_LENGTH, int(length)))
    return "".join(_random.choice(ALPHABET) for _ in range(length))


def is_valid_id(door_id: str | None) -> bool:
    """True iff door_id is non-empty, at most 64 chars, and only uses [0-9a-zA-Z_-]."""
    if not door_id:
        return False
    return DOOR_ID_PATTERN.fullmatch(door_id) is not None
