"""llama.cpp embedding provider adapter (local GGUF models).

Two backends, chosen by the config:

* **native** (default): the GGUF file is located with
  :class:`~vecbox.utils.model_paths.ModelPathResolver` and loaded through
  ``llama-cpp-python``.  The loaded model is shared per process and every
  call is serialised through its handle lock.  The binding has no batch
  call, so a batch issues one native call per item, in order.
* **server**: when ``endpoint`` is set, texts go to a running
  ``llama-server`` through its OpenAI-compatible ``/v1/embeddings`` route
  in a single request.

Both must return pooled, flat vectors.  Token-level (nested) output means
the model was loaded without pooling and is rejected by shape validation.
"""

from __future__ import annotations

from functools import partial
from pathlib import Path
from typing import Any

import httpx
import openai
import structlog

from vecbox.config.settings import Settings
from vecbox.models.embedding import ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.base import BackendEmbedding, BaseEmbeddingProvider
from vecbox.providers.embedding.local_model_cache import LocalModelHandle, get_local_model
from vecbox.utils.errors import BackendError, BackendTimeoutError, ConfigurationError
from vecbox.utils.model_paths import ModelPathResolver

logger = structlog.get_logger(logger_name=__name__)

# Matched against the lower-cased model file name, first hit wins.
_MODEL_DIMENSIONS: tuple[tuple[str, int], ...] = (
    ("nomic-embed-text", 768),
    ("all-minilm-l6-v2", 384),
    ("bge-small", 384),
    ("bge-base", 768),
    ("bge-large", 1024),
    ("mxbai-embed-large", 1024),
    ("bert-base", 768),
)


def _load_llama(model_path: str) -> Any:
    from llama_cpp import Llama

    return Llama(model_path=model_path, embedding=True, verbose=False)


def _close_llama(model: Any) -> None:
    model.close()


def _embed_one(model: Any, text: str) -> Any:
    return model.embed(text)


class LlamaCppEmbeddingProvider(BaseEmbeddingProvider):
    """Embedding provider for GGUF models run by llama.cpp."""

    _identifier = ProviderIdentifier.LLAMACPP
    _default_model = "nomic-embed-text-v1.5.Q4_K_M.gguf"
    _default_dimension = 768

    def __init__(
        self,
        config: ProviderConfig,
        resolver: ModelPathResolver | None = None,
    ) -> None:
        super().__init__(config)
        self._resolver = resolver or ModelPathResolver(Settings().get_model_search_dirs())
        self._handle: LocalModelHandle | None = None
        self._server_url = config.endpoint.rstrip("/") if config.endpoint else None
        self._client: openai.AsyncOpenAI | None = None
        if self._server_url:
            self._client = openai.AsyncOpenAI(
                base_url=f"{self._server_url}/v1",
                # llama-server only checks the key when started with --api-key.
                api_key=config.credential or "llamacpp",
                timeout=config.timeout_seconds,
                max_retries=config.max_retries,
            )

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    def get_dimensions(self) -> int:
        if self._config.dimensions:
            return self._config.dimensions
        name = Path(self._model).name.lower()
        for marker, dimension in _MODEL_DIMENSIONS:
            if marker in name:
                return dimension
        return self._default_dimension

    async def is_ready(self) -> bool:
        """Server mode: ``/health`` answers 200.  Native mode: the model file loads."""
        if self._server_url:
            return await self._server_ready()
        try:
            handle = self._native_handle()
        except ConfigurationError as exc:
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                error=str(exc),
            )
            return False
        ready = await handle.ensure_loaded(timeout=self._config.timeout_seconds)
        if not ready:
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                model=self._model,
                error=str(handle.load_error or "model still loading"),
            )
        return ready

    async def close(self) -> None:
        # The native handle is shared; release_local_models() owns it.
        if self._client is not None:
            await self._client.close()

    # ------------------------------------------------------------------
    # Backend hook
    # ------------------------------------------------------------------

    async def _embed_texts(self, texts: list[str]) -> BackendEmbedding:
        if self._client is not None:
            return await self._embed_via_server(texts)

        handle = self._native_handle()
        vectors = []
        for text in texts:
            vectors.append(await handle.run(partial(_embed_one, text=text)))
        return BackendEmbedding(vectors=vectors, model=self._model)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _native_handle(self) -> LocalModelHandle:
        if self._handle is None:
            model_path = self._resolver.resolve(self._model)
            self._handle = get_local_model(
                f"llamacpp:{model_path}",
                partial(_load_llama, str(model_path)),
                closer=_close_llama,
            )
        return self._handle

    async def _server_ready(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=3.0) as client:
                response = await client.get(f"{self._server_url}/health")
            return response.status_code == 200
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                endpoint=self._server_url,
                error=str(exc),
            )
            return False

    async def _embed_via_server(self, texts: list[str]) -> BackendEmbedding:
        try:
            response = await self._client.embeddings.create(
                input=texts,
                model=self._model,
                encoding_format="float",
            )
        except openai.APITimeoutError as exc:
            raise BackendTimeoutError(
                message=f"llama.cpp server timed out after {self._config.timeout_ms} ms",
                provider_name=self.get_provider_name(),
            ) from exc
        except openai.APIError as exc:
            raise BackendError(
                message=f"llama.cpp server error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc
        return BackendEmbedding(
            vectors=[item.embedding for item in response.data],
            model=self._model,
        )
