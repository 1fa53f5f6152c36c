"""Hashing utilities for mdbook-split.

Provides content-based hashing used to derive stable chapter paths.
"""

from __future__ import annotations

import hashlib


def content_hash(data: bytes) -> str:
    """Generate a hash for arbitrary byte content.

    Args:
        data: Byte content to hash.

    Returns:
        Full SHA-256 digest as lowercase hex (64 characters).
    """
    hasher = hashlib.sha256()
    hasher.update(data)
    return hasher.hexdigest()


def string_hash(text: str) -> str:
    """Generate a hash for string content.

    Args:
        text: String content to hash (UTF-8 encoded, may be empty).

    Returns:
        Full SHA-256 digest as lowercase hex (64 characters).
    """
    return content_hash(text.encode("utf-8"))
