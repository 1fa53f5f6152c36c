"""Utility functions for mdbook-split."""

from mdbook_split.utils.hashing import content_hash, string_hash

__all__ = ["content_hash", "string_hash"]
