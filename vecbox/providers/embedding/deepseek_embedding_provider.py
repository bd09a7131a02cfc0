"""DeepSeek embedding provider adapter (OpenAI-compatible endpoint)."""

from __future__ import annotations

from vecbox.models.embedding import ProviderIdentifier
from vecbox.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider


class DeepSeekEmbeddingProvider(OpenAIEmbeddingProvider):
    """Embedding provider for DeepSeek's OpenAI-compatible API.

    Declares 4096 dimensions for ``deepseek-chat``.  If the account or model
    has no embeddings endpoint the call fails with ``BackendError`` and the
    auto-selector moves on.
    """

    _identifier = ProviderIdentifier.DEEPSEEK
    _default_model = "deepseek-chat"
    _model_dimensions = {"deepseek-chat": 4096}
    _default_dimension = 4096
    _default_base_url = "https://api.deepseek.com/v1"
    _vendor_label = "DeepSeek"
