"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client.  The same client speaks to any vendor
that exposes an OpenAI-shaped ``/embeddings`` endpoint, so the Mistral and
DeepSeek adapters subclass this one and only change defaults.  A custom
``endpoint`` on the config points the client at a gateway (Azure proxy,
TogetherAI, ...).
"""

from __future__ import annotations

from typing import Any, ClassVar

import openai
import structlog

from vecbox.models.embedding import EmbedUsage, ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.base import BackendEmbedding, BaseEmbeddingProvider
from vecbox.utils.errors import BackendError, BackendTimeoutError

logger = structlog.get_logger(logger_name=__name__)

# Known embedding model dimensions.
_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "text-embedding-ada-002": 1536,
}

# Models that accept a ``dimensions`` request parameter (Matryoshka truncation).
_RESIZABLE_PREFIX = "text-embedding-3"


class OpenAIEmbeddingProvider(BaseEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Uses ``text-embedding-3-small`` (1536 dims) by default.  Sends every
    batch in a single request, so a batch costs one round trip.
    """

    _identifier = ProviderIdentifier.OPENAI
    _default_model = "text-embedding-3-small"
    _model_dimensions = _MODEL_DIMENSIONS
    _default_dimension = 1536
    # Base URL used when the config does not set ``endpoint``; None means
    # the SDK default (api.openai.com).
    _default_base_url: ClassVar[str | None] = None
    _vendor_label: ClassVar[str] = "OpenAI"

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        api_key = self._require_credential(self._vendor_label)

        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "timeout": config.timeout_seconds,
            "max_retries": config.max_retries,
        }
        base_url = config.endpoint or self._default_base_url
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = openai.AsyncOpenAI(**client_kwargs)

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def is_ready(self) -> bool:
        """Return ``True`` if an authenticated ``models.list`` call succeeds."""
        try:
            await self._client.models.list()
            return True
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                error=str(exc),
            )
            return False

    async def close(self) -> None:
        await self._client.close()

    # ------------------------------------------------------------------
    # Backend hook
    # ------------------------------------------------------------------

    async def _embed_texts(self, texts: list[str]) -> BackendEmbedding:
        request: dict[str, Any] = {
            "input": texts,
            "model": self._model,
            "encoding_format": "float",
        }
        if self._config.dimensions and self._model.startswith(_RESIZABLE_PREFIX):
            request["dimensions"] = self._config.dimensions

        try:
            response = await self._client.embeddings.create(**request)
        except openai.APITimeoutError as exc:
            raise BackendTimeoutError(
                message=f"{self._vendor_label} request timed out after {self._config.timeout_ms} ms",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise BackendError(
                message=f"{self._vendor_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        if not response.data:
            raise BackendError(
                message=f"No embedding returned from {self._vendor_label} API",
                provider_name=self.get_provider_name(),
            )

        usage = None
        if response.usage is not None:
            usage = EmbedUsage(
                prompt_tokens=getattr(response.usage, "prompt_tokens", None),
                total_tokens=getattr(response.usage, "total_tokens", None),
            )
        # Some compatible vendors leave ``model`` empty in the response.
        reported_model = response.model if isinstance(response.model, str) and response.model else None
        return BackendEmbedding(
            vectors=[item.embedding for item in response.data],
            model=reported_model or self._model,
            usage=usage,
        )
