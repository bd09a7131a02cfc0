"""Embedding provider implementations.

Six implementations of IEmbeddingProvider, listed in auto-selection order:
    1. LlamaCppEmbeddingProvider  -- GGUF via llama-cpp-python or llama-server.
       Local; only tried when LLAMACPP_MODEL_PATH is configured.
    2. FastEmbedEmbeddingProvider -- ONNX via fastembed, all-MiniLM-L6-v2
       (384 dims).  Local, free, offline once weights are cached.
    3. OpenAIEmbeddingProvider    -- text-embedding-3-small (1536 dims).
    4. GeminiEmbeddingProvider    -- gemini-embedding-001 (768 dims).
    5. MistralEmbeddingProvider   -- mistral-embed (1024 dims).
    6. DeepSeekEmbeddingProvider  -- deepseek-chat (4096 dims).

fastembed and llama-cpp-python are optional extras, imported only when a
model is loaded; without them the local providers report not-ready.
"""

from vecbox.providers.embedding.local_model_cache import release_local_models
from vecbox.providers.embedding.registry import create_provider, list_supported_providers

__all__ = ["create_provider", "list_supported_providers", "release_local_models"]
