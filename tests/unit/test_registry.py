"""Unit tests for the provider registry."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from vecbox.models.embedding import ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.deepseek_embedding_provider import DeepSeekEmbeddingProvider
from vecbox.providers.embedding.fastembed_embedding_provider import FastEmbedEmbeddingProvider
from vecbox.providers.embedding.gemini_embedding_provider import GeminiEmbeddingProvider
from vecbox.providers.embedding.llamacpp_embedding_provider import LlamaCppEmbeddingProvider
from vecbox.providers.embedding.mistral_embedding_provider import MistralEmbeddingProvider
from vecbox.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from vecbox.providers.embedding.registry import create_provider, list_supported_providers
from vecbox.utils.errors import ConfigurationError, UnsupportedProviderError
from vecbox.utils.model_paths import ModelPathResolver


def test_list_supported_providers_is_stable() -> None:
    assert list_supported_providers() == list(ProviderIdentifier)
    assert list_supported_providers() == list_supported_providers()


@pytest.mark.parametrize(
    ("identifier", "expected_class"),
    [
        ("openai", OpenAIEmbeddingProvider),
        ("gemini", GeminiEmbeddingProvider),
        ("mistral", MistralEmbeddingProvider),
        ("deepseek", DeepSeekEmbeddingProvider),
    ],
)
def test_creates_remote_providers(identifier: str, expected_class: type) -> None:
    with patch("vecbox.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI"):
        provider = create_provider(ProviderConfig(provider=identifier, credential="key"))
    assert type(provider) is expected_class
    assert provider.get_provider_name() == identifier


def test_creates_local_providers() -> None:
    assert isinstance(create_provider(ProviderConfig(provider="fastembed")), FastEmbedEmbeddingProvider)
    with patch(
        "vecbox.providers.embedding.llamacpp_embedding_provider.Settings",
    ) as settings_cls:
        settings_cls.return_value.get_model_search_dirs.return_value = []
        provider = create_provider(ProviderConfig(provider="llamacpp"))
    assert isinstance(provider, LlamaCppEmbeddingProvider)
    assert isinstance(provider._resolver, ModelPathResolver)


def test_identifier_is_case_insensitive() -> None:
    provider = create_provider(ProviderConfig(provider="  FastEmbed "))
    assert provider.get_provider_name() == "fastembed"


def test_unknown_identifier() -> None:
    with pytest.raises(UnsupportedProviderError) as exc_info:
        create_provider(ProviderConfig(provider="claude"))
    assert "claude" in str(exc_info.value)
    assert "openai" in str(exc_info.value)


def test_blank_identifier() -> None:
    with pytest.raises(ConfigurationError):
        create_provider(ProviderConfig(provider="   "))


def test_missing_credential_fails_at_construction() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        create_provider(ProviderConfig(provider="gemini"))
    assert exc_info.value.provider_name == "gemini"


def test_unregistered_identifier() -> None:
    with patch.dict(
        "vecbox.providers.embedding.registry._PROVIDERS",
        clear=True,
        values={ProviderIdentifier.OPENAI: OpenAIEmbeddingProvider},
    ):
        assert list_supported_providers() == [ProviderIdentifier.OPENAI]
        with pytest.raises(UnsupportedProviderError):
            create_provider(ProviderConfig(provider="fastembed"))
