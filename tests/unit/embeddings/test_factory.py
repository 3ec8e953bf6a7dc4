"""Unit tests for provider selection."""

import logging

from hybrid_vectors.config import EmbeddingSettings
from hybrid_vectors.embeddings import (
    OpenAIEmbeddingProvider,
    VoyageEmbeddingProvider,
    create_embedding_provider,
    resolve_provider_name,
)


class TestResolveProviderName:
    def test_defaults_to_openai(self, monkeypatch):
        monkeypatch.delenv("EMBEDDINGS_PROVIDER", raising=False)
        assert resolve_provider_name() == "openai"

    def test_environment_is_used_when_not_configured(self, monkeypatch):
        monkeypatch.setenv("EMBEDDINGS_PROVIDER", "voyage")
        assert resolve_provider_name() == "voyage"

    def test_explicit_config_wins_over_environment(self, monkeypatch):
        monkeypatch.setenv("EMBEDDINGS_PROVIDER", "voyage")
        assert resolve_provider_name("openai") == "openai"

    def test_unknown_provider_falls_back_with_warning(self, monkeypatch, caplog):
        monkeypatch.delenv("EMBEDDINGS_PROVIDER", raising=False)
        with caplog.at_level(logging.WARNING, logger="hybrid_vectors.embeddings.factory"):
            assert resolve_provider_name("cohere") == "openai"
        assert "cohere" in caplog.text


class TestCreateEmbeddingProvider:
    def test_builds_configured_provider(self):
        provider = create_embedding_provider(EmbeddingSettings(provider="voyage", api_key="pa-test"))
        assert isinstance(provider, VoyageEmbeddingProvider)
        assert provider.provider_type == "voyage"

    def test_missing_credentials_do_not_raise(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.delenv("EMBEDDINGS_PROVIDER", raising=False)
        provider = create_embedding_provider(EmbeddingSettings())
        assert isinstance(provider, OpenAIEmbeddingProvider)
        assert provider.is_available() is False
