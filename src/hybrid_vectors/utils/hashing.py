"""
Hash helpers for point identifiers.

Qdrant accepts only UUIDs or unsigned integers as point ids, so natural keys
are hashed into UUID-shaped strings.
"""

from __future__ import annotations

import hashlib
import uuid


def compute_uuid5(content: str, prefix: str = "") -> str:
    """
    Compute a deterministic UUID5 string and prefix it for namespacing.
    """
    digest = uuid.uuid5(uuid.NAMESPACE_URL, content)
    return f"{prefix}{digest}"


def sha256_uuid(content: str) -> str:
    """
    Format the first 128 bits of ``sha256(content)`` as ``8-4-4-4-12``.

    :param content: Natural key, already namespaced by the caller.
    """
    digest = hashlib.sha256(content.encode("utf-8")).hexdigest()
    return f"{digest[0:8]}-{digest[8:12]}-{digest[12:16]}-{digest[16:20]}-{digest[20:32]}"


def sha256_hex(content: str) -> str:
    """Return the hex SHA-256 digest of *content*."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()
