"""Local ONNX-based embedding provider using fastembed.

Wraps the ``fastembed`` library using ONNX Runtime: no PyTorch, no API key,
works offline once the model weights are cached.  This is the first
credential-free candidate the auto-selector tries.

The loaded ``TextEmbedding`` is shared per process through
:mod:`vecbox.providers.embedding.local_model_cache`.
"""

from __future__ import annotations

from functools import partial
from typing import Any

import structlog

from vecbox.models.embedding import ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.base import BackendEmbedding, BaseEmbeddingProvider
from vecbox.providers.embedding.local_model_cache import get_local_model

logger = structlog.get_logger(logger_name=__name__)

# Known model dimensions for fastembed-supported models.
_MODEL_DIMENSIONS: dict[str, int] = {
    "sentence-transformers/all-MiniLM-L6-v2": 384,
    "BAAI/bge-small-en-v1.5": 384,
    "BAAI/bge-base-en-v1.5": 768,
    "BAAI/bge-large-en-v1.5": 1024,
    "nomic-ai/nomic-embed-text-v1.5": 768,
    "intfloat/multilingual-e5-large": 1024,
}

_BATCH_LIMIT = 64


def _load_text_embedding(model_name: str) -> Any:
    from fastembed import TextEmbedding

    return TextEmbedding(model_name=model_name)


def _embed_with(model: Any, texts: list[str]) -> list[list[float]]:
    # fastembed yields one numpy array per text, in input order.
    return [vector.tolist() for vector in model.embed(texts, batch_size=_BATCH_LIMIT)]


class FastEmbedEmbeddingProvider(BaseEmbeddingProvider):
    """Embedding provider backed by fastembed (ONNX Runtime).

    Loads the model on the first readiness probe or call; the first load
    may download the weights.
    """

    _identifier = ProviderIdentifier.FASTEMBED
    _default_model = "sentence-transformers/all-MiniLM-L6-v2"
    _model_dimensions = _MODEL_DIMENSIONS
    _default_dimension = 384

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        self._handle = get_local_model(
            f"fastembed:{self._model}",
            partial(_load_text_embedding, self._model),
        )

    async def is_ready(self) -> bool:
        """Return ``True`` once the ONNX model has loaded successfully."""
        ready = await self._handle.ensure_loaded(timeout=self._config.timeout_seconds)
        if not ready:
            logger.warning(
                "embedding_readiness_check_failed",
                provider=self.get_provider_name(),
                model=self._model,
                error=str(self._handle.load_error or "model still loading"),
            )
        return ready

    async def _embed_texts(self, texts: list[str]) -> BackendEmbedding:
        vectors = await self._handle.run(partial(_embed_with, texts=texts))
        return BackendEmbedding(vectors=vectors, model=self._model)
