"""Hashing utilities for cache key generation."""

import hashlib
import json
from collections.abc import Iterable
from typing import Any


def hash_value(value: Any) -> str:
    """Create a deterministic hash of a value.

    Args:
        value: Any JSON-serializable value.

    Returns:
        A hexadecimal hash string (first 16 chars of SHA-256).
    """
    if value is None:
        return "none"

    # Normalize to JSON with sorted keys for determinism
    normalized = json.dumps(value, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def unique_tags(tags: Iterable[str]) -> list[str]:
    """Drop duplicate and empty tags, keeping first-seen order.

    Args:
        tags: The tags to normalize.

    Returns:
        The de-duplicated list of tags.
    """
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        if tag and tag not in seen:
            seen.add(tag)
            result.append(tag)
    return result
