"""Abstract base class for text-embedding providers.

Defines the capability contract every backend adapter implements.  The
dispatcher and the auto-selector only ever talk to this interface, so a
hosted API, a local ONNX model and a llama.cpp handle are interchangeable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

from vecbox.models.embedding import BatchEmbedResult, EmbedInput, EmbedResult


# Concrete implementations, located in vecbox/providers/embedding/:
#   FastEmbedEmbeddingProvider  -- ONNX via fastembed, local, no credential
#   LlamaCppEmbeddingProvider   -- GGUF via llama-cpp-python or a llama.cpp server
#   OpenAIEmbeddingProvider     -- text-embedding-3-small (requires API key)
#   GeminiEmbeddingProvider     -- gemini-embedding-001 over REST
#   MistralEmbeddingProvider    -- mistral-embed
#   DeepSeekEmbeddingProvider   -- DeepSeek OpenAI-compatible endpoint
class IEmbeddingProvider(ABC):
    """Contract for embedding backends.

    All operations that may reach the backend are coroutines, even when the
    backend itself is synchronous, so callers never special-case a provider.
    """

    @abstractmethod
    async def embed(self, embed_input: EmbedInput) -> EmbedResult:
        """Embed a single input.

        Raises
        ------
        vecbox.utils.errors.InputError
            If the input resolves to empty or whitespace-only text.
        vecbox.utils.errors.BackendError
            If the backend call fails or returns no usable embedding.
        """

    @abstractmethod
    async def embed_batch(self, inputs: Sequence[EmbedInput]) -> BatchEmbedResult:
        """Embed a batch of inputs.

        ``result.embeddings[i]`` corresponds to ``inputs[i]``.  If any item
        fails the whole batch fails; partial results are never returned.
        """

    @abstractmethod
    async def is_ready(self) -> bool:
        """Return ``True`` if the backend can currently serve requests.

        Must never raise.  Evaluated on every call, not cached, because
        backend health can change between calls.
        """

    @abstractmethod
    def get_dimensions(self) -> int:
        """Return the declared vector width for the configured model.

        Does not touch the network.  Every result this provider returns is
        checked against this value.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the stable identity used in result records and logs."""

    async def close(self) -> None:
        """Release backend resources held by this instance.

        Default is a no-op; providers holding SDK clients override it.
        """
