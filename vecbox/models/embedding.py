"""Request and result models for the embedding dispatch layer.

Defines Pydantic v2 models for provider configuration, embedding inputs and
the normalised results every provider returns regardless of its backend's
native response shape.  All models use frozen config so a provider can hold
on to the ``ProviderConfig`` it was constructed with without copying it.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ProviderIdentifier(str, Enum):
    """Closed set of embedding backends known to the registry.

    Definition order is the order reported by ``list_supported_providers``.
    """

    FASTEMBED = "fastembed"
    LLAMACPP = "llamacpp"
    OPENAI = "openai"
    GEMINI = "gemini"
    MISTRAL = "mistral"
    DEEPSEEK = "deepseek"


# ---------------------------------------------------------------------------
# ProviderConfig -- everything a provider constructor needs.
# ---------------------------------------------------------------------------
class ProviderConfig(BaseModel):
    """Configuration record for a single provider instance.

    ``provider`` is kept as a plain string so that an unknown identifier
    surfaces as ``UnsupportedProviderError`` from the registry rather than
    as a validation error here.
    """

    model_config = ConfigDict(frozen=True)

    provider: str
    # Falls back to the provider's default model when omitted.
    model: str | None = None
    # API key; mandatory for remote providers, ignored by local ones.
    credential: str | None = None
    # Base URL override (OpenAI-compatible gateways, llama.cpp server).
    endpoint: str | None = None
    timeout_ms: int = Field(default=30_000, gt=0)
    max_retries: int = Field(default=2, ge=0)
    # Declared vector width for models missing from a provider's table.
    dimensions: int | None = Field(default=None, gt=0)

    @property
    def has_credential(self) -> bool:
        return bool(self.credential and self.credential.strip())

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000


# ---------------------------------------------------------------------------
# EmbedInput -- literal text or a file reference, never both.
# ---------------------------------------------------------------------------
class EmbedInput(BaseModel):
    """One item to embed: either literal ``text`` or a ``file_path``.

    Emptiness is not checked here; ``read_input`` rejects inputs that
    resolve to blank text with ``InputError``.
    """

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    file_path: str | None = None

    @model_validator(mode="after")
    def _exactly_one_source(self) -> EmbedInput:
        if (self.text is None) == (self.file_path is None):
            raise ValueError("EmbedInput requires exactly one of 'text' or 'file_path'")
        return self


class EmbedUsage(BaseModel):
    """Token accounting reported by the backend, when it reports any."""

    model_config = ConfigDict(frozen=True)

    prompt_tokens: int | None = None
    total_tokens: int | None = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------
class EmbedResult(BaseModel):
    """Normalised result of embedding a single input."""

    model_config = ConfigDict(frozen=True)

    embedding: list[float]
    dimensions: int = Field(ge=1)
    provider: str
    model: str
    usage: EmbedUsage | None = None

    @model_validator(mode="after")
    def _dimensions_match(self) -> EmbedResult:
        if len(self.embedding) != self.dimensions:
            raise ValueError(
                f"embedding has {len(self.embedding)} values but dimensions={self.dimensions}"
            )
        return self


class BatchEmbedResult(BaseModel):
    """Normalised result of embedding a batch; ``embeddings[i]`` belongs to input ``i``."""

    model_config = ConfigDict(frozen=True)

    embeddings: list[list[float]]
    dimensions: int = Field(ge=1)
    provider: str
    model: str
    usage: EmbedUsage | None = None

    @model_validator(mode="after")
    def _dimensions_match(self) -> BatchEmbedResult:
        for index, vector in enumerate(self.embeddings):
            if len(vector) != self.dimensions:
                raise ValueError(
                    f"embeddings[{index}] has {len(vector)} values but dimensions={self.dimensions}"
                )
        return self

    def __len__(self) -> int:
        return len(self.embeddings)
