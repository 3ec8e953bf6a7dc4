"""
Configuration helpers for the hybrid vector stack.

The submodule exposes:

- :mod:`schema` with strongly typed pydantic models, loadable from YAML or
  the process environment.
"""

from hybrid_vectors.config.schema import (
    DEFAULT_EMBEDDING_DIM,
    EmbeddingSettings,
    EnvironmentSettings,
    HybridVectorsSettings,
    SearchSettings,
    VectorStoreSettings,
    load_settings,
)

__all__ = [
    "DEFAULT_EMBEDDING_DIM",
    "EmbeddingSettings",
    "EnvironmentSettings",
    "HybridVectorsSettings",
    "SearchSettings",
    "VectorStoreSettings",
    "load_settings",
]
