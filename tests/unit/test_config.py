"""Unit tests for settings models and their YAML and environment sources."""

import pydantic
import pytest

from hybrid_vectors.config import (
    EnvironmentSettings,
    HybridVectorsSettings,
    SearchSettings,
    VectorStoreSettings,
    load_settings,
)
from hybrid_vectors.embeddings import VoyageEmbeddingProvider, create_embedding_provider
from hybrid_vectors.exceptions import ConfigurationError


class TestDefaults:
    def test_search_weights(self):
        search = SearchSettings()
        assert search.semantic_weight == 0.5
        assert search.keyword_weight == 0.5
        assert search.exact_match_bonus == 0.3
        assert search.score_threshold == 0.01
        assert search.candidate_multiplier == 2

    def test_store_defaults(self):
        store = VectorStoreSettings()
        assert store.bulk_read_concurrency == 100
        assert store.delete_settle_seconds == 0.05

    def test_unknown_keys_are_rejected(self):
        with pytest.raises(pydantic.ValidationError):
            HybridVectorsSettings.from_dict({"search": {"semantic_wieght": 0.4}})


class TestLoadSettings:
    def test_reads_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text(
            "embeddings:\n"
            "  provider: voyage\n"
            "  dim: 1024\n"
            "vector_store:\n"
            "  url: http://qdrant:6333\n"
            "search:\n"
            "  score_threshold: 0.05\n",
            encoding="utf-8",
        )
        settings = load_settings(path)
        assert settings.embeddings.provider == "voyage"
        assert settings.embeddings.dim == 1024
        assert settings.vector_store.url == "http://qdrant:6333"
        assert settings.search.score_threshold == 0.05

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == HybridVectorsSettings()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_settings(tmp_path / "absent.yaml")

    def test_from_yaml_matches_load_settings(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("search:\n  default_limit: 5\n", encoding="utf-8")
        assert HybridVectorsSettings.from_yaml(path) == load_settings(path)
        assert HybridVectorsSettings.from_yaml(path).search.default_limit == 5

    def test_non_mapping_document_is_rejected(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- embeddings\n- search\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            HybridVectorsSettings.from_yaml(path)


class TestFromEnv:
    def test_maps_environment_variables(self, monkeypatch):
        monkeypatch.setenv("QDRANT_URL", "http://vectors:6333")
        monkeypatch.setenv("QDRANT_API_KEY", "qdrant-secret")
        monkeypatch.setenv("EMBEDDINGS_PROVIDER", "openai")
        monkeypatch.setenv("EMBEDDINGS_MODEL", "text-embedding-3-large")
        monkeypatch.setenv("EMBEDDINGS_DIMENSIONS", "3072")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        settings = HybridVectorsSettings.from_env(EnvironmentSettings(_env_file=None))

        assert settings.vector_store.url == "http://vectors:6333"
        assert settings.vector_store.api_key == "qdrant-secret"
        assert settings.embeddings.provider == "openai"
        assert settings.embeddings.model == "text-embedding-3-large"
        assert settings.embeddings.dim == 3072
        assert settings.embeddings.api_key == "sk-test"

    def test_voyage_uses_its_own_key(self, monkeypatch):
        monkeypatch.setenv("EMBEDDINGS_PROVIDER", "voyage")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
        monkeypatch.setenv("VOYAGE_API_KEY", "pa-test")

        settings = HybridVectorsSettings.from_env(EnvironmentSettings(_env_file=None))

        assert settings.embeddings.api_key == "pa-test"

    def test_unset_environment_keeps_defaults(self, monkeypatch):
        for name in EnvironmentSettings.model_fields:
            monkeypatch.delenv(name, raising=False)

        settings = HybridVectorsSettings.from_env(EnvironmentSettings(_env_file=None))

        assert settings == HybridVectorsSettings()

    def test_provider_name_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("EMBEDDINGS_PROVIDER", " Voyage ")
        monkeypatch.setenv("OPENAI_API_KEY", "sk-openai")
        monkeypatch.setenv("VOYAGE_API_KEY", "pa-voyage")

        settings = HybridVectorsSettings.from_env(EnvironmentSettings(_env_file=None))
        provider = create_embedding_provider(settings.embeddings)

        assert settings.embeddings.provider == "voyage"
        assert isinstance(provider, VoyageEmbeddingProvider)
        assert provider.api_key == "pa-voyage"
