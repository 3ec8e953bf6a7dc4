"""
Embedding backends.
"""

from hybrid_vectors.embeddings.base import BaseEmbeddingProvider, EmbeddingStatus
from hybrid_vectors.embeddings.factory import (
    DEFAULT_PROVIDER,
    PROVIDERS,
    create_embedding_provider,
    resolve_provider_name,
)
from hybrid_vectors.embeddings.openai import OpenAIEmbeddingProvider
from hybrid_vectors.embeddings.voyage import VoyageEmbeddingProvider

__all__ = [
    "BaseEmbeddingProvider",
    "DEFAULT_PROVIDER",
    "EmbeddingStatus",
    "OpenAIEmbeddingProvider",
    "PROVIDERS",
    "VoyageEmbeddingProvider",
    "create_embedding_provider",
    "resolve_provider_name",
]
