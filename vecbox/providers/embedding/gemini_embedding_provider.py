"""Google Gemini embedding provider adapter.

Talks to the Generative Language REST API directly over ``httpx``:

    POST {base}/models/{model}:embedContent        (single text)
    POST {base}/models/{model}:batchEmbedContents  (several texts, one round trip)

Native responses are ``{"embedding": {"values": [...]}}`` and
``{"embeddings": [{"values": [...]}, ...]}`` respectively.  Anything else is
rejected as a ``BackendError``.  Retries HTTP 429/5xx and transport errors
with linear backoff, up to ``max_retries`` extra attempts.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from vecbox.models.embedding import ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.base import BackendEmbedding, BaseEmbeddingProvider
from vecbox.utils.errors import BackendError, BackendTimeoutError

logger = structlog.get_logger(logger_name=__name__)

_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
_RETRYABLE_STATUS = frozenset({429, 500, 502, 503, 504})
_RETRY_BACKOFF = 0.5  # seconds, multiplied by the attempt number

_MODEL_DIMENSIONS: dict[str, int] = {
    "gemini-embedding-001": 768,
    "text-embedding-004": 768,
    "embedding-001": 768,
}


class GeminiEmbeddingProvider(BaseEmbeddingProvider):
    """Embedding provider backed by ``gemini-embedding-001``.

    Requests ``outputDimensionality`` equal to :meth:`get_dimensions` so the
    vector width is the declared one (the model defaults to 3072).
    """

    _identifier = ProviderIdentifier.GEMINI
    _default_model = "gemini-embedding-001"
    _model_dimensions = _MODEL_DIMENSIONS
    _default_dimension = 768

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        api_key = self._require_credential("Google Gemini")
        # The REST API addresses models as "models/<name>".
        self._model = self._model.removeprefix("models/")
        self._base_url = (config.endpoint or _API_BASE).rstrip("/")
        self._http = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout_seconds),
            headers={"x-goog-api-key": api_key},
        )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def is_ready(self) -> bool:
        """Return ``True`` if the model metadata endpoint answers 200 for this key."""
        try:
            response = await self._http.get(f"{self._base_url}/models/{self._model}")
            if response.status_code == 200:
                return True
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                status=response.status_code,
            )
            return False
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                error=str(exc),
            )
            return False

    async def close(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Backend hook
    # ------------------------------------------------------------------

    async def _embed_texts(self, texts: list[str]) -> BackendEmbedding:
        if len(texts) == 1:
            data = await self._post("embedContent", self._content_request(texts[0]))
            embedding = data.get("embedding") if isinstance(data, dict) else None
            return BackendEmbedding(vectors=[self._values(embedding, 0)], model=self._model)

        payload = {"requests": [self._content_request(text) for text in texts]}
        data = await self._post("batchEmbedContents", payload)
        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if not isinstance(embeddings, list):
            raise BackendError(
                message="Gemini response has no 'embeddings' list",
                provider_name=self.get_provider_name(),
            )
        return BackendEmbedding(
            vectors=[self._values(item, index) for index, item in enumerate(embeddings)],
            model=self._model,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _content_request(self, text: str) -> dict[str, Any]:
        return {
            "model": f"models/{self._model}",
            "content": {"parts": [{"text": text}]},
            "outputDimensionality": self.get_dimensions(),
        }

    def _values(self, embedding: Any, index: int) -> Any:
        if not isinstance(embedding, dict) or "values" not in embedding:
            raise BackendError(
                message=f"Gemini embedding {index} has no 'values' field",
                provider_name=self.get_provider_name(),
            )
        return embedding["values"]

    async def _post(self, method: str, payload: dict[str, Any]) -> Any:
        """POST to ``models/{model}:{method}`` with retry on transient failures."""
        url = f"{self._base_url}/models/{self._model}:{method}"
        attempts = self._config.max_retries + 1
        last_error = ""
        timed_out = False

        for attempt in range(1, attempts + 1):
            try:
                response = await self._http.post(url, json=payload)
            except httpx.TimeoutException as exc:
                last_error, timed_out = str(exc) or "timeout", True
            except httpx.HTTPError as exc:
                last_error, timed_out = str(exc), False
            else:
                if response.status_code == 200:
                    return response.json()
                if response.status_code not in _RETRYABLE_STATUS:
                    raise BackendError(
                        message=f"Gemini API error {response.status_code}: {response.text[:200]}",
                        provider_name=self.get_provider_name(),
                    )
                last_error, timed_out = f"HTTP {response.status_code}", False

            if attempt < attempts:
                backoff = _RETRY_BACKOFF * attempt
                logger.warning(
                    "gemini_request_retry",
                    method=method,
                    attempt=attempt,
                    backoff_s=backoff,
                    error=last_error,
                )
                await asyncio.sleep(backoff)

        error_class = BackendTimeoutError if timed_out else BackendError
        raise error_class(
            message=f"Gemini API request failed after {attempts} attempts: {last_error}",
            provider_name=self.get_provider_name(),
        )
