"""
Abstract embedding provider interface.

Providers never raise at construction when credentials are missing; they
report ``is_available() == False`` instead and refuse to embed.
"""

from __future__ import annotations

import asyncio
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Tuple, Type

import numpy as np
from tenacity import (
    after_log,
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from hybrid_vectors.config.schema import DEFAULT_EMBEDDING_DIM, EmbeddingSettings
from hybrid_vectors.exceptions import (
    EmbeddingError,
    EmbeddingGenerationFailed,
    InvalidInput,
    ProviderUnavailable,
)
from hybrid_vectors.utils import AsyncRateLimiter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmbeddingStatus:
    """Snapshot used for diagnostics and search-mode reporting."""

    available: bool
    provider: str
    model: str
    dimensions: int
    reason: Optional[str] = None


class BaseEmbeddingProvider(ABC):
    """Base contract for embedding backends."""

    provider_type: str = ""
    default_model: str = ""
    default_dimensions: int = DEFAULT_EMBEDDING_DIM
    api_key_env: str = ""
    RETRYABLE_ERRORS: Tuple[Type[BaseException], ...] = ()

    def __init__(self, settings: EmbeddingSettings | None = None) -> None:
        """Resolve credentials and build the SDK client when possible."""
        self.settings = settings or EmbeddingSettings()
        self.model = self.settings.model or self.default_model
        self.dimensions = self.settings.dim or self.default_dimensions
        self.api_key = self.settings.api_key or os.getenv(self.api_key_env)
        self.client: Any = None
        self._reason: Optional[str] = None

        self._rate_limiter = AsyncRateLimiter(rpm=self.settings.requests_per_minute)
        self._semaphore: asyncio.Semaphore | None = None

        if not self.api_key:
            self._reason = f"{self.api_key_env} not set - vector operations will fail"
            return
        try:
            self.client = self._create_client()
        except Exception as exc:
            self.client = None
            self._reason = f"{self.provider_type} client could not be created: {exc}"
            logger.warning(self._reason)

    @abstractmethod
    def _create_client(self) -> Any:
        """Instantiate the SDK client. Called only when an API key is present."""

    @abstractmethod
    async def _embed(self, batch: List[str]) -> List[List[float]]:
        """Send one batch to the backend and return one vector per text."""

    @property
    def semaphore(self) -> asyncio.Semaphore:
        """Lazy initialization of semaphore."""
        if self._semaphore is None:
            self._semaphore = asyncio.Semaphore(self.settings.max_concurrent)
        return self._semaphore

    def is_available(self) -> bool:
        return self.client is not None

    def get_dimensions(self) -> int:
        return self.dimensions

    def get_model(self) -> str:
        return self.model

    def status(self) -> EmbeddingStatus:
        """Report availability together with the reason when unavailable."""
        return EmbeddingStatus(
            available=self.is_available(),
            provider=self.provider_type,
            model=self.model,
            dimensions=self.dimensions,
            reason=None if self.is_available() else self._reason,
        )

    def _require_available(self) -> None:
        if not self.is_available():
            raise ProviderUnavailable(
                f"{self.provider_type} embedding provider not available"
                + (f": {self._reason}" if self._reason else "")
            )

    async def generate_embedding(self, text: str) -> List[float]:
        """
        Embed a single text.

        :raises ProviderUnavailable: provider not configured.
        :raises InvalidInput: *text* is empty or whitespace only.
        :raises EmbeddingGenerationFailed: the backend call failed.
        """
        self._require_available()
        if not text or not text.strip():
            raise InvalidInput("Text cannot be empty for embedding generation")
        vectors = await self._embed_all([text.strip()])
        return vectors[0]

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Embed several texts. Empty entries are dropped before sending, so the
        result may be shorter than *texts*.
        """
        self._require_available()
        valid = [text.strip() for text in texts or [] if text and text.strip()]
        if not valid:
            return []
        return await self._embed_all(valid)

    def _normalize(self, embeddings: np.ndarray) -> np.ndarray:
        """
        Normalize embeddings if the config requests it.
        """
        if not self.settings.normalize_embeddings:
            return embeddings
        norms = np.linalg.norm(embeddings, axis=1, keepdims=True)
        norms[norms == 0] = 1e-9
        return embeddings / norms

    async def _embed_all(self, texts: List[str]) -> List[List[float]]:
        """Split into batches, embed them concurrently and keep input order."""
        batch_size = self.settings.batch_size
        batches = [texts[i : i + batch_size] for i in range(0, len(texts), batch_size)]
        try:
            results = await asyncio.gather(*(self._process_batch(batch) for batch in batches))
        except EmbeddingError:
            raise
        except Exception as exc:
            raise EmbeddingGenerationFailed(
                f"{self.provider_type} embedding failed: {exc}"
            ) from exc

        vectors = [vector for batch in results for vector in batch]
        if len(vectors) != len(texts):
            raise EmbeddingGenerationFailed(
                f"{self.provider_type} returned {len(vectors)} embeddings for {len(texts)} texts"
            )
        embeddings = np.asarray(vectors, dtype=np.float32)
        return self._normalize(embeddings).tolist()

    async def _process_batch(self, batch: List[str]) -> List[List[float]]:
        """Process a single batch with semaphore and rate limiter."""
        async with self.semaphore:
            await self._rate_limiter.acquire()
            return await self._call_with_retry(batch)

    async def _call_with_retry(self, batch: List[str]) -> List[List[float]]:
        """Call the backend with exponential backoff on transient errors."""

        @retry(
            retry=retry_if_exception_type(self.RETRYABLE_ERRORS),
            wait=wait_exponential(
                multiplier=1,
                min=self.settings.retry_min_wait,
                max=self.settings.retry_max_wait,
            ),
            stop=stop_after_attempt(self.settings.max_retries + 1),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            after=after_log(logger, logging.DEBUG),
            reraise=True,
        )
        async def _do_call():
            return await self._embed(batch)

        return await _do_call()

    async def close(self) -> None:
        """Release the SDK client, if it holds connections."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
