"""Unit tests for the embedding request/result models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from vecbox.models.embedding import (
    BatchEmbedResult,
    EmbedInput,
    EmbedResult,
    EmbedUsage,
    ProviderConfig,
    ProviderIdentifier,
)


# ======================================================================
# ProviderConfig
# ======================================================================


class TestProviderConfig:
    def test_defaults(self) -> None:
        config = ProviderConfig(provider="openai")
        assert config.model is None
        assert config.credential is None
        assert config.timeout_ms == 30_000
        assert config.max_retries == 2
        assert config.dimensions is None

    def test_timeout_seconds(self) -> None:
        assert ProviderConfig(provider="openai", timeout_ms=1500).timeout_seconds == 1.5

    def test_rejects_non_positive_timeout(self) -> None:
        with pytest.raises(ValidationError):
            ProviderConfig(provider="openai", timeout_ms=0)

    def test_rejects_negative_retries(self) -> None:
        with pytest.raises(ValidationError):
            ProviderConfig(provider="openai", max_retries=-1)

    def test_has_credential_ignores_whitespace(self) -> None:
        assert ProviderConfig(provider="openai", credential="sk-x").has_credential is True
        assert ProviderConfig(provider="openai", credential="   ").has_credential is False
        assert ProviderConfig(provider="openai").has_credential is False

    def test_frozen(self) -> None:
        config = ProviderConfig(provider="openai")
        with pytest.raises(ValidationError):
            config.model = "other"  # type: ignore[misc]

    def test_unknown_provider_is_accepted_here(self) -> None:
        # Rejected later by the registry, not by the model.
        assert ProviderConfig(provider="nope").provider == "nope"


# ======================================================================
# EmbedInput
# ======================================================================


class TestEmbedInput:
    def test_text(self) -> None:
        assert EmbedInput(text="hello").text == "hello"

    def test_file_path(self) -> None:
        assert EmbedInput(file_path="doc.txt").file_path == "doc.txt"

    def test_empty_text_is_constructible(self) -> None:
        assert EmbedInput(text="").text == ""

    def test_both_sources_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EmbedInput(text="a", file_path="b.txt")

    def test_no_source_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EmbedInput()


# ======================================================================
# Results
# ======================================================================


class TestEmbedResult:
    def test_valid(self) -> None:
        result = EmbedResult(
            embedding=[0.1, 0.2, 0.3],
            dimensions=3,
            provider="openai",
            model="text-embedding-3-small",
            usage=EmbedUsage(prompt_tokens=2, total_tokens=2),
        )
        assert result.dimensions == len(result.embedding)
        assert result.usage.total_tokens == 2

    def test_dimension_mismatch_rejected(self) -> None:
        with pytest.raises(ValidationError):
            EmbedResult(embedding=[0.1, 0.2], dimensions=3, provider="x", model="m")


class TestBatchEmbedResult:
    def test_valid(self) -> None:
        result = BatchEmbedResult(
            embeddings=[[1.0, 2.0], [3.0, 4.0]],
            dimensions=2,
            provider="x",
            model="m",
        )
        assert len(result) == 2

    def test_ragged_batch_rejected(self) -> None:
        with pytest.raises(ValidationError):
            BatchEmbedResult(
                embeddings=[[1.0, 2.0], [3.0]],
                dimensions=2,
                provider="x",
                model="m",
            )


def test_provider_identifier_order_is_stable() -> None:
    assert [p.value for p in ProviderIdentifier] == [
        "fastembed",
        "llamacpp",
        "openai",
        "gemini",
        "mistral",
        "deepseek",
    ]
