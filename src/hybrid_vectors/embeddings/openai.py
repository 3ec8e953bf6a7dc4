"""
OpenAI-compatible embedding backend with async support and rate limiting.
"""

from __future__ import annotations

import logging
from typing import List

from openai import (
    APIConnectionError,
    APITimeoutError,
    AsyncOpenAI,
    InternalServerError,
    RateLimitError,
)

from hybrid_vectors.embeddings.base import BaseEmbeddingProvider
from hybrid_vectors.exceptions import EmbeddingGenerationFailed

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider(BaseEmbeddingProvider):
    """
    Embedding wrapper that talks to OpenAI or any OpenAI-compatible service.
    """

    provider_type = "openai"
    default_model = "text-embedding-3-small"
    api_key_env = "OPENAI_API_KEY"

    RETRYABLE_ERRORS = (
        RateLimitError,
        APIConnectionError,
        APITimeoutError,
        InternalServerError,
    )

    def _create_client(self) -> AsyncOpenAI:
        return AsyncOpenAI(
            api_key=self.api_key,
            base_url=self.settings.base_url,
            timeout=self.settings.request_timeout,
            max_retries=0,
        )

    async def _embed(self, batch: List[str]) -> List[List[float]]:
        kwargs = {}
        # Only the text-embedding-3 family accepts a reduced output size.
        if self.settings.dim and self.model.startswith("text-embedding-3"):
            kwargs["dimensions"] = self.settings.dim
        response = await self.client.embeddings.create(
            model=self.model,
            input=batch,
            encoding_format="float",
            **kwargs,
        )

        if response.usage:
            logger.debug(f"Embedding batch usage: {response.usage.total_tokens} tokens")

        if not response.data:
            raise EmbeddingGenerationFailed("No embedding data returned from OpenAI API")

        rows = sorted(response.data, key=lambda row: row.index)
        return [list(row.embedding) for row in rows]

    async def close(self) -> None:
        """Close the client connection."""
        if self.client is not None:
            await self.client.close()
