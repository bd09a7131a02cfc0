"""Unit tests for direct dispatch through one named provider."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from tests.conftest import make_fake_provider
from vecbox.models.embedding import (
    BatchEmbedResult,
    EmbedInput,
    EmbedResult,
    ProviderConfig,
    ProviderIdentifier,
)
from vecbox.services.dispatcher import coerce_input, embed, is_batch
from vecbox.utils.errors import (
    BackendError,
    ConfigurationError,
    InputError,
    ProviderNotReadyError,
    UnsupportedProviderError,
)

# ======================================================================
# Input coercion
# ======================================================================


class TestCoerceInput:
    def test_string_is_text(self) -> None:
        assert coerce_input("hello") == EmbedInput(text="hello")

    def test_path_is_file(self) -> None:
        assert coerce_input(Path("doc.txt")) == EmbedInput(file_path="doc.txt")

    def test_mapping(self) -> None:
        assert coerce_input({"file_path": "a.txt"}) == EmbedInput(file_path="a.txt")

    def test_embed_input_passthrough(self) -> None:
        item = EmbedInput(text="x")
        assert coerce_input(item) is item

    def test_invalid_mapping(self) -> None:
        with pytest.raises(InputError):
            coerce_input({"text": "a", "file_path": "b"})

    def test_unsupported_type(self) -> None:
        with pytest.raises(InputError):
            coerce_input(42)  # type: ignore[arg-type]

    def test_is_batch(self) -> None:
        assert is_batch(["a"]) is True
        assert is_batch(("a", "b")) is True
        assert is_batch("abc") is False
        assert is_batch(EmbedInput(text="a")) is False


# ======================================================================
# embed()
# ======================================================================


class TestEmbed:
    @pytest.mark.asyncio
    async def test_openai_single_text(self) -> None:
        response = MagicMock()
        response.data = [MagicMock(embedding=[0.1, 0.2, 0.3])]
        response.usage = MagicMock(prompt_tokens=2, total_tokens=2)
        response.model = "text-embedding-3-small"
        client = AsyncMock()
        client.embeddings.create = AsyncMock(return_value=response)

        with patch(
            "vecbox.providers.embedding.openai_embedding_provider.openai.AsyncOpenAI",
            return_value=client,
        ):
            result = await embed(
                ProviderConfig(provider="openai", credential="sk-test", dimensions=3),
                EmbedInput(text="hello world"),
            )

        assert isinstance(result, EmbedResult)
        assert result.embedding == [0.1, 0.2, 0.3]
        assert result.dimensions == 3
        assert result.provider == "openai"
        assert result.model == "text-embedding-3-small"
        client.models.list.assert_awaited_once()
        client.close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_not_ready_never_embeds(self, register_fakes) -> None:
        fake = make_fake_provider(ProviderIdentifier.OPENAI, ready=False)
        register_fakes({ProviderIdentifier.OPENAI: fake})

        with pytest.raises(ProviderNotReadyError) as exc_info:
            await embed(ProviderConfig(provider="openai"), "hello")

        assert exc_info.value.provider_name == "openai"
        assert fake.backend_calls == []
        assert fake.closed == 1

    @pytest.mark.asyncio
    async def test_batch_preserves_order(self, register_fakes, tmp_path: Path) -> None:
        doc = tmp_path / "doc.txt"
        doc.write_text("b", encoding="utf-8")
        fake = make_fake_provider(
            ProviderIdentifier.FASTEMBED,
            dimension=1,
            vectorize=lambda text: [float(ord(text))],
        )
        register_fakes({ProviderIdentifier.FASTEMBED: fake})

        result = await embed(
            ProviderConfig(provider="fastembed"),
            [EmbedInput(text="a"), EmbedInput(file_path=str(doc)), {"text": "c"}],
        )

        assert isinstance(result, BatchEmbedResult)
        assert result.embeddings == [[97.0], [98.0], [99.0]]
        assert result.dimensions == 1
        assert fake.backend_calls == [["a", "b", "c"]]

    @pytest.mark.asyncio
    async def test_single_element_list_is_batch(self, register_fakes) -> None:
        register_fakes({ProviderIdentifier.OPENAI: make_fake_provider(ProviderIdentifier.OPENAI)})

        result = await embed(ProviderConfig(provider="openai"), ["only"])

        assert isinstance(result, BatchEmbedResult)
        assert len(result) == 1

    @pytest.mark.asyncio
    async def test_backend_error_propagates_without_fallback(self, register_fakes) -> None:
        failing = make_fake_provider(
            ProviderIdentifier.OPENAI,
            fail_with=BackendError(message="quota exceeded", provider_name="openai"),
        )
        other = make_fake_provider(ProviderIdentifier.FASTEMBED)
        register_fakes({ProviderIdentifier.OPENAI: failing, ProviderIdentifier.FASTEMBED: other})

        with pytest.raises(BackendError):
            await embed(ProviderConfig(provider="openai"), "hello")

        assert other.instances == []
        assert failing.closed == 1

    @pytest.mark.asyncio
    async def test_unknown_provider(self) -> None:
        with pytest.raises(UnsupportedProviderError):
            await embed(ProviderConfig(provider="claude"), "hello")

    @pytest.mark.asyncio
    async def test_missing_credential(self) -> None:
        with pytest.raises(ConfigurationError):
            await embed(ProviderConfig(provider="mistral"), "hello")

    @pytest.mark.asyncio
    async def test_blank_text_is_input_error(self, register_fakes) -> None:
        fake = make_fake_provider(ProviderIdentifier.OPENAI)
        register_fakes({ProviderIdentifier.OPENAI: fake})

        with pytest.raises(InputError):
            await embed(ProviderConfig(provider="openai"), "   ")

        assert fake.backend_calls == []

    @pytest.mark.asyncio
    async def test_empty_batch_is_input_error(self, register_fakes) -> None:
        register_fakes({ProviderIdentifier.OPENAI: make_fake_provider(ProviderIdentifier.OPENAI)})

        with pytest.raises(InputError):
            await embed(ProviderConfig(provider="openai"), [])
