"""
Hybrid semantic + keyword search over Qdrant collections.
"""

from hybrid_vectors.config import HybridVectorsSettings, load_settings
from hybrid_vectors.embeddings import BaseEmbeddingProvider, create_embedding_provider
from hybrid_vectors.services import HybridSearchResult, HybridVectorService, MatchType, PayloadMapper
from hybrid_vectors.vectorstores import QdrantVectorStore, VectorDocument, VectorStore

__version__ = "0.1.0"

__all__ = [
    "BaseEmbeddingProvider",
    "HybridSearchResult",
    "HybridVectorService",
    "HybridVectorsSettings",
    "MatchType",
    "PayloadMapper",
    "QdrantVectorStore",
    "VectorDocument",
    "VectorStore",
    "create_embedding_provider",
    "load_settings",
]
