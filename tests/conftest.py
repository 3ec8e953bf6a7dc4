"""Shared fixtures: in-memory Qdrant, a deterministic embedding provider."""

from typing import List
from unittest.mock import AsyncMock

import pytest
from qdrant_client import AsyncQdrantClient

from hybrid_vectors.config import EmbeddingSettings, HybridVectorsSettings, VectorStoreSettings
from hybrid_vectors.embeddings import OpenAIEmbeddingProvider

DIMENSIONS = 4


def fake_vector(text: str) -> List[float]:
    """Tiny bag-of-topics embedding, good enough for cosine ranking in tests."""
    lowered = text.lower()
    return [
        1.0 + 4.0 * ("database" in lowered),
        1.0 + 4.0 * ("network" in lowered),
        1.0 + 4.0 * ("storage" in lowered),
        1.0,
    ]


@pytest.fixture
def memory_client():
    return AsyncQdrantClient(location=":memory:")


@pytest.fixture
def store_settings():
    return VectorStoreSettings(delete_settle_seconds=0)


@pytest.fixture
def settings(store_settings):
    return HybridVectorsSettings(
        embeddings=EmbeddingSettings(api_key="test-key", dim=DIMENSIONS),
        vector_store=store_settings,
    )


@pytest.fixture
def provider(settings):
    """OpenAI provider whose backend call is replaced by :func:`fake_vector`."""
    provider = OpenAIEmbeddingProvider(settings.embeddings)
    provider._embed = AsyncMock(side_effect=lambda batch: [fake_vector(text) for text in batch])
    return provider


@pytest.fixture
def unavailable_provider(monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    return OpenAIEmbeddingProvider(EmbeddingSettings(dim=DIMENSIONS))
