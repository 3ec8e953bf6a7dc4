"""
Error taxonomy shared by the embedding, storage and service layers.
"""

from __future__ import annotations


class HybridVectorsError(RuntimeError):
    """Root of every error raised by this package."""


class ConfigurationError(HybridVectorsError):
    """Missing or invalid configuration detected at construction time."""


class EmbeddingError(HybridVectorsError):
    """Base class for embedding provider failures."""


class ProviderUnavailable(EmbeddingError):
    """The embedding provider is not configured or not reachable."""


class InvalidInput(EmbeddingError, ValueError):
    """The text handed to the provider cannot be embedded."""


class EmbeddingGenerationFailed(EmbeddingError):
    """The provider is configured but the call failed."""


class StoreOperationFailed(HybridVectorsError):
    """A vector store call failed; ``operation`` names the failing call."""

    def __init__(self, operation: str, cause: BaseException | str) -> None:
        self.operation = operation
        self.cause = cause
        super().__init__(f"Vector store operation '{operation}' failed: {cause}")


class SchemaMismatch(HybridVectorsError):
    """An existing collection was declared with a different vector size."""

    def __init__(self, collection: str, existing: int, requested: int) -> None:
        self.collection = collection
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Collection '{collection}' has {existing} dimensions, {requested} requested"
        )
