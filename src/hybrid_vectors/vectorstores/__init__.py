"""
Vector database abstractions and the Qdrant client.
"""

from hybrid_vectors.vectorstores.base import (
    HAS_EMBEDDING_FIELD,
    SEARCH_TEXT_FIELD,
    CollectionStats,
    SearchResult,
    VectorDocument,
    VectorStore,
)
from hybrid_vectors.vectorstores.qdrant import QdrantVectorStore

__all__ = [
    "CollectionStats",
    "HAS_EMBEDDING_FIELD",
    "QdrantVectorStore",
    "SEARCH_TEXT_FIELD",
    "SearchResult",
    "VectorDocument",
    "VectorStore",
]
