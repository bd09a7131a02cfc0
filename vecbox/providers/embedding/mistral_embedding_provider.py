"""Mistral embedding provider adapter.

Mistral's ``/v1/embeddings`` endpoint accepts and returns the OpenAI
request/response shape, so this adapter reuses the OpenAI-compatible client
pointed at ``api.mistral.ai``.
"""

from __future__ import annotations

from vecbox.models.embedding import ProviderIdentifier
from vecbox.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider


class MistralEmbeddingProvider(OpenAIEmbeddingProvider):
    """Embedding provider backed by ``mistral-embed`` (1024 dims)."""

    _identifier = ProviderIdentifier.MISTRAL
    _default_model = "mistral-embed"
    _model_dimensions = {"mistral-embed": 1024}
    _default_dimension = 1024
    _default_base_url = "https://api.mistral.ai/v1"
    _vendor_label = "Mistral"
