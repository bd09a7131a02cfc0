"""Abstract interfaces for embedding backends.

Concrete adapters live in ``vecbox/providers/embedding/`` and are
constructed by the registry from a ``ProviderConfig``.
"""

from vecbox.interfaces.embedding_provider import IEmbeddingProvider

__all__ = ["IEmbeddingProvider"]
