"""
Resolve the active embedding provider from configuration.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Optional, Type

from hybrid_vectors.config.schema import EmbeddingSettings
from hybrid_vectors.embeddings.base import BaseEmbeddingProvider
from hybrid_vectors.embeddings.openai import OpenAIEmbeddingProvider
from hybrid_vectors.embeddings.voyage import VoyageEmbeddingProvider

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "openai"
PROVIDER_ENV = "EMBEDDINGS_PROVIDER"

PROVIDERS: Dict[str, Type[BaseEmbeddingProvider]] = {
    OpenAIEmbeddingProvider.provider_type: OpenAIEmbeddingProvider,
    VoyageEmbeddingProvider.provider_type: VoyageEmbeddingProvider,
}


def resolve_provider_name(explicit: Optional[str] = None) -> str:
    """
    Pick the provider name: explicit config first, then ``EMBEDDINGS_PROVIDER``,
    then the OpenAI baseline. Unknown names fall back to the baseline.
    """
    requested = (explicit or os.getenv(PROVIDER_ENV) or DEFAULT_PROVIDER).strip().lower()
    if requested not in PROVIDERS:
        logger.warning(
            f"Unknown embedding provider '{requested}', falling back to '{DEFAULT_PROVIDER}'"
        )
        return DEFAULT_PROVIDER
    return requested


def create_embedding_provider(settings: EmbeddingSettings | None = None) -> BaseEmbeddingProvider:
    """
    Instantiate the configured provider. Never raises on missing credentials.
    """
    settings = settings or EmbeddingSettings()
    name = resolve_provider_name(settings.provider)
    provider = PROVIDERS[name](settings)
    if provider.is_available():
        logger.debug(f"Embedding provider '{name}' ready with model {provider.get_model()}")
    return provider
