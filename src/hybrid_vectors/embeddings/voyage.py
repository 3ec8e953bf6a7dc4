"""
Voyage AI embedding backend.
"""

from __future__ import annotations

import logging
from typing import List

import voyageai
from voyageai.error import APIConnectionError, RateLimitError, ServiceUnavailableError, Timeout

from hybrid_vectors.embeddings.base import BaseEmbeddingProvider
from hybrid_vectors.exceptions import EmbeddingGenerationFailed

logger = logging.getLogger(__name__)


class VoyageEmbeddingProvider(BaseEmbeddingProvider):
    """
    Embedding provider backed by Voyage AI.

    The default model emits 1536 dimensions natively. A configured ``dim`` is
    forwarded as ``output_dimension`` for models that support flexible sizes.
    """

    provider_type = "voyage"
    default_model = "voyage-large-2"
    api_key_env = "VOYAGE_API_KEY"

    RETRYABLE_ERRORS = (
        RateLimitError,
        APIConnectionError,
        ServiceUnavailableError,
        Timeout,
    )

    def _create_client(self) -> voyageai.AsyncClient:
        return voyageai.AsyncClient(
            api_key=self.api_key,
            max_retries=0,
            timeout=self.settings.request_timeout,
        )

    async def _embed(self, batch: List[str]) -> List[List[float]]:
        kwargs = {"model": self.model}
        if self.settings.dim:
            kwargs["output_dimension"] = self.settings.dim
        result = await self.client.embed(batch, **kwargs)

        logger.debug(f"Embedding batch usage: {result.total_tokens} tokens")

        if not result.embeddings:
            raise EmbeddingGenerationFailed("No embedding data returned from Voyage AI API")
        return [list(vector) for vector in result.embeddings]
