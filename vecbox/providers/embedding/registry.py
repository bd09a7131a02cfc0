"""Provider registry: maps a provider identifier to its adapter class.

Pure lookup and construction.  No readiness checks, retries or fallback
happen here; construction never touches the network or loads a model.
"""

from __future__ import annotations

import structlog

from vecbox.interfaces.embedding_provider import IEmbeddingProvider
from vecbox.models.embedding import ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.deepseek_embedding_provider import DeepSeekEmbeddingProvider
from vecbox.providers.embedding.fastembed_embedding_provider import FastEmbedEmbeddingProvider
from vecbox.providers.embedding.gemini_embedding_provider import GeminiEmbeddingProvider
from vecbox.providers.embedding.llamacpp_embedding_provider import LlamaCppEmbeddingProvider
from vecbox.providers.embedding.mistral_embedding_provider import MistralEmbeddingProvider
from vecbox.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider
from vecbox.utils.errors import ConfigurationError, UnsupportedProviderError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDERS: dict[ProviderIdentifier, type[IEmbeddingProvider]] = {
    ProviderIdentifier.FASTEMBED: FastEmbedEmbeddingProvider,
    ProviderIdentifier.LLAMACPP: LlamaCppEmbeddingProvider,
    ProviderIdentifier.OPENAI: OpenAIEmbeddingProvider,
    ProviderIdentifier.GEMINI: GeminiEmbeddingProvider,
    ProviderIdentifier.MISTRAL: MistralEmbeddingProvider,
    ProviderIdentifier.DEEPSEEK: DeepSeekEmbeddingProvider,
}


def create_provider(config: ProviderConfig) -> IEmbeddingProvider:
    """Construct the provider named by ``config.provider``.

    Raises
    ------
    ConfigurationError
        If the identifier is blank, or the provider rejects the config
        (e.g. a remote provider without a credential).
    UnsupportedProviderError
        If the identifier is not registered.
    """
    raw = config.provider.strip().lower()
    if not raw:
        raise ConfigurationError(message="Provider identifier must not be empty")

    try:
        identifier = ProviderIdentifier(raw)
    except ValueError as exc:
        raise UnsupportedProviderError(
            message=f"Unsupported provider: {config.provider!r} "
            f"(supported: {', '.join(p.value for p in list_supported_providers())})",
            provider_name=config.provider,
        ) from exc

    provider_class = _PROVIDERS.get(identifier)
    if provider_class is None:
        raise UnsupportedProviderError(
            message=f"No adapter registered for provider {identifier.value!r}",
            provider_name=identifier.value,
        )

    logger.debug("creating_embedding_provider", provider=identifier.value, model=config.model)
    return provider_class(config)


def list_supported_providers() -> list[ProviderIdentifier]:
    """Return the registered identifiers in their stable declaration order."""
    return [identifier for identifier in ProviderIdentifier if identifier in _PROVIDERS]
