"""Shared behaviour for every embedding provider adapter.

Concrete adapters only implement :meth:`BaseEmbeddingProvider._embed_texts`,
which sends already-resolved texts to the backend and returns raw vectors.
Everything else lives here, once: resolving inputs, bounding the call with
``timeout_ms``, wrapping backend exceptions, strict shape validation and
building the normalised result records.
"""

from __future__ import annotations

import asyncio
from abc import abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar, Sequence

import structlog

from vecbox.interfaces.embedding_provider import IEmbeddingProvider
from vecbox.models.embedding import (
    BatchEmbedResult,
    EmbedInput,
    EmbedResult,
    EmbedUsage,
    ProviderConfig,
    ProviderIdentifier,
)
from vecbox.utils.errors import (
    BackendError,
    BackendTimeoutError,
    ConfigurationError,
    InputError,
    VecboxError,
)
from vecbox.utils.input_reader import read_input

logger = structlog.get_logger(logger_name=__name__)


@dataclass(frozen=True)
class BackendEmbedding:
    """Raw backend output before validation: one vector per submitted text."""

    vectors: list[Any]
    model: str | None = None
    usage: EmbedUsage | None = None


class BaseEmbeddingProvider(IEmbeddingProvider):
    """Template for adapters; subclasses set the class attributes below."""

    _identifier: ClassVar[ProviderIdentifier]
    _default_model: ClassVar[str] = ""
    # Known model -> vector width.  Models not listed use _default_dimension
    # unless ProviderConfig.dimensions says otherwise.
    _model_dimensions: ClassVar[dict[str, int]] = {}
    _default_dimension: ClassVar[int] = 0

    def __init__(self, config: ProviderConfig) -> None:
        self._config = config
        self._model = config.model or self._default_model

    @property
    def config(self) -> ProviderConfig:
        return self._config

    @property
    def model(self) -> str:
        return self._model

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, embed_input: EmbedInput) -> EmbedResult:
        text = await read_input(embed_input, provider_name=self.get_provider_name())
        output = await self._call_backend([text])
        vector = output.vectors[0]
        return EmbedResult(
            embedding=vector,
            dimensions=len(vector),
            provider=self.get_provider_name(),
            model=output.model or self._model,
            usage=output.usage,
        )

    async def embed_batch(self, inputs: Sequence[EmbedInput]) -> BatchEmbedResult:
        if not inputs:
            raise InputError(
                message="Batch must contain at least one input",
                provider_name=self.get_provider_name(),
            )
        # gather() preserves argument order, so texts[i] belongs to inputs[i].
        texts = await asyncio.gather(
            *(read_input(item, provider_name=self.get_provider_name()) for item in inputs)
        )
        output = await self._call_backend(list(texts))
        return BatchEmbedResult(
            embeddings=output.vectors,
            dimensions=self.get_dimensions(),
            provider=self.get_provider_name(),
            model=output.model or self._model,
            usage=output.usage,
        )

    def get_dimensions(self) -> int:
        if self._config.dimensions:
            return self._config.dimensions
        return self._model_dimensions.get(self._model, self._default_dimension)

    def get_provider_name(self) -> str:
        return self._identifier.value

    # ------------------------------------------------------------------
    # Backend hook
    # ------------------------------------------------------------------

    @abstractmethod
    async def _embed_texts(self, texts: list[str]) -> BackendEmbedding:
        """Send *texts* to the backend and return one vector per text, in order."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _require_credential(self, label: str) -> str:
        """Return the stripped credential or raise ``ConfigurationError``."""
        if not self._config.has_credential:
            raise ConfigurationError(
                message=f"{label} API key is required",
                provider_name=self.get_provider_name(),
            )
        return self._config.credential.strip()

    async def _call_backend(self, texts: list[str]) -> BackendEmbedding:
        name = self.get_provider_name()
        try:
            output = await asyncio.wait_for(
                self._embed_texts(texts),
                timeout=self._config.timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise BackendTimeoutError(
                message=f"Backend call exceeded {self._config.timeout_ms} ms",
                provider_name=name,
            ) from exc
        except VecboxError:
            raise
        except Exception as exc:  # noqa: BLE001
            raise BackendError(
                message=f"{type(exc).__name__}: {exc}",
                provider_name=name,
            ) from exc

        vectors = self._validate(output.vectors, expected=len(texts))
        logger.info(
            "embedding_batch",
            provider=name,
            model=output.model or self._model,
            batch_size=len(texts),
            tokens=output.usage.total_tokens if output.usage else None,
        )
        return BackendEmbedding(vectors=vectors, model=output.model, usage=output.usage)

    def _validate(self, vectors: list[Any], expected: int) -> list[list[float]]:
        """Reject any response that is not *expected* flat vectors of the declared width."""
        name = self.get_provider_name()
        if not isinstance(vectors, list) or len(vectors) != expected:
            count = len(vectors) if isinstance(vectors, list) else type(vectors).__name__
            raise BackendError(
                message=f"Backend returned {count} embeddings for {expected} inputs",
                provider_name=name,
            )

        declared = self.get_dimensions()
        validated: list[list[float]] = []
        for index, vector in enumerate(vectors):
            if not isinstance(vector, list) or not vector:
                raise BackendError(
                    message=f"Embedding {index} is empty or not a list",
                    provider_name=name,
                )
            if not all(_is_number(value) for value in vector):
                raise BackendError(
                    message=f"Embedding {index} is not a flat list of numbers",
                    provider_name=name,
                )
            if len(vector) != declared:
                raise BackendError(
                    message=(
                        f"Embedding {index} has {len(vector)} dimensions, "
                        f"expected {declared} for model '{self._model}'"
                    ),
                    provider_name=name,
                )
            validated.append([float(value) for value in vector])
        return validated


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
