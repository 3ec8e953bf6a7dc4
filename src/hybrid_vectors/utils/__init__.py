"""
Shared helper utilities.
"""

from hybrid_vectors.utils.hashing import compute_uuid5, sha256_hex, sha256_uuid
from hybrid_vectors.utils.rate_limiter import AsyncRateLimiter
from hybrid_vectors.utils.text import (
    extract_keywords,
    has_whole_word,
    keyword_relevance,
    trigger_overlap,
)

__all__ = [
    "AsyncRateLimiter",
    "compute_uuid5",
    "extract_keywords",
    "has_whole_word",
    "keyword_relevance",
    "sha256_hex",
    "sha256_uuid",
    "trigger_overlap",
]
