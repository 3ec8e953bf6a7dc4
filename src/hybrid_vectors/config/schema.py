"""
Typed configuration objects for the hybrid vector stack.

All knobs converge into :class:`HybridVectorsSettings` so downstream modules do
not have to touch YAML, environment variables or dictionaries directly.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hybrid_vectors.exceptions import ConfigurationError


DEFAULT_EMBEDDING_DIM = 1536


class EmbeddingSettings(BaseModel):
    """Embedding backend configuration."""

    provider: Optional[str] = None
    model: Optional[str] = None
    dim: Optional[int] = Field(default=None, ge=1)
    base_url: str | None = None
    api_key: str | None = None
    batch_size: int = Field(default=16, ge=1)
    normalize_embeddings: bool = False

    requests_per_minute: int = Field(default=0, ge=0)
    max_concurrent: int = Field(default=20, ge=1)
    request_timeout: float = Field(default=60.0, ge=1.0)

    max_retries: int = Field(default=3, ge=0)
    retry_min_wait: float = Field(default=1.0, ge=0.0)
    retry_max_wait: float = Field(default=30.0, ge=0.0)

    model_config = {"extra": "forbid"}


class VectorStoreSettings(BaseModel):
    """Qdrant connection and collection behaviour."""

    url: str = "http://localhost:6333"
    api_key: str | None = None
    prefer_grpc: bool = False
    timeout: int | None = None
    on_disk: bool = True
    default_segment_number: int = Field(default=2, ge=1)
    bulk_read_concurrency: int = Field(default=100, ge=1)
    delete_settle_seconds: float = Field(default=0.05, ge=0.0)
    keyword_candidate_multiplier: int = Field(default=3, ge=1)
    list_limit: int = Field(default=10000, ge=1)

    model_config = {"extra": "forbid"}


class SearchSettings(BaseModel):
    """Hybrid ranking weights.

    The defaults are empirically chosen and kept for behaviour parity.
    """

    semantic_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    keyword_weight: float = Field(default=0.5, ge=0.0, le=1.0)
    exact_match_bonus: float = Field(default=0.3, ge=0.0, le=1.0)
    score_threshold: float = Field(default=0.01, ge=0.0, le=1.0)
    default_limit: int = Field(default=10, ge=1)
    candidate_multiplier: int = Field(default=2, ge=1)
    semantic_candidate_threshold: float = Field(default=0.1, ge=0.0, le=1.0)
    min_keyword_length: int = Field(default=3, ge=1)

    model_config = {"extra": "forbid"}


class EnvironmentSettings(BaseSettings):
    """Process environment (and optional ``.env``) read by :meth:`HybridVectorsSettings.from_env`."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    QDRANT_URL: Optional[str] = None
    QDRANT_API_KEY: Optional[str] = None
    EMBEDDINGS_PROVIDER: Optional[str] = None
    EMBEDDINGS_MODEL: Optional[str] = None
    EMBEDDINGS_DIMENSIONS: Optional[int] = None
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    VOYAGE_API_KEY: Optional[str] = None


class HybridVectorsSettings(BaseModel):
    """Aggregated settings tree consumed by the services."""

    embeddings: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    vector_store: VectorStoreSettings = Field(default_factory=VectorStoreSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)

    model_config = {"extra": "forbid"}

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "HybridVectorsSettings":
        """Validate a plain mapping (typically parsed YAML)."""
        return cls.model_validate(raw or {})

    @classmethod
    def from_yaml(cls, path: str | os.PathLike[str]) -> "HybridVectorsSettings":
        """Parse a YAML document; an empty file yields the defaults."""
        path = Path(path)
        try:
            raw = yaml.safe_load(path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise ConfigurationError(f"Configuration file '{path}' is missing.") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Configuration file '{path}' is not valid YAML: {exc}") from exc
        if raw is not None and not isinstance(raw, dict):
            raise ConfigurationError(f"Configuration file '{path}' must contain a mapping.")
        return cls.from_dict(raw)

    @classmethod
    def from_env(cls, env: EnvironmentSettings | None = None) -> "HybridVectorsSettings":
        """
        Build settings from environment variables.

        Unset variables keep the model defaults; the provider API key is
        resolved later by the provider itself.
        """
        env = env or EnvironmentSettings()
        embeddings: Dict[str, Any] = {}
        provider = (env.EMBEDDINGS_PROVIDER or "").strip().lower()
        if provider:
            embeddings["provider"] = provider
        if env.EMBEDDINGS_MODEL:
            embeddings["model"] = env.EMBEDDINGS_MODEL
        if env.EMBEDDINGS_DIMENSIONS:
            embeddings["dim"] = env.EMBEDDINGS_DIMENSIONS
        if env.OPENAI_BASE_URL:
            embeddings["base_url"] = env.OPENAI_BASE_URL
        api_key = env.VOYAGE_API_KEY if provider == "voyage" else env.OPENAI_API_KEY
        if api_key:
            embeddings["api_key"] = api_key

        vector_store: Dict[str, Any] = {}
        if env.QDRANT_URL:
            vector_store["url"] = env.QDRANT_URL
        if env.QDRANT_API_KEY:
            vector_store["api_key"] = env.QDRANT_API_KEY

        return cls(
            embeddings=EmbeddingSettings(**embeddings),
            vector_store=VectorStoreSettings(**vector_store),
        )


def load_settings(path: str | os.PathLike[str]) -> HybridVectorsSettings:
    """Shorthand for :meth:`HybridVectorsSettings.from_yaml`."""
    return HybridVectorsSettings.from_yaml(path)
