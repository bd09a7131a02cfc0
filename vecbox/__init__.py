"""vecbox -- one call to embed text with any of several backends.

    >>> from vecbox import ProviderConfig, auto_embed, embed
    >>> result = await embed(ProviderConfig(provider="openai", credential="sk-..."), "hello")
    >>> batch = await auto_embed(["first text", "second text"])

``embed`` uses exactly the provider you configure.  ``auto_embed`` walks a
fixed priority list (local models first, then hosted APIs whose key is set
in the environment) and returns the first success.
"""

from vecbox.config.settings import Settings
from vecbox.models.embedding import (
    BatchEmbedResult,
    EmbedInput,
    EmbedResult,
    EmbedUsage,
    ProviderConfig,
    ProviderIdentifier,
)
from vecbox.providers.embedding.local_model_cache import release_local_models
from vecbox.providers.embedding.registry import create_provider, list_supported_providers
from vecbox.services.auto_selector import AUTO_EMBED_CANDIDATES, Candidate, auto_embed
from vecbox.services.dispatcher import embed
from vecbox.services.failure_cache import FailureCache
from vecbox.utils.errors import (
    BackendError,
    BackendTimeoutError,
    CandidateFailure,
    ConfigurationError,
    InputError,
    NoProviderAvailableError,
    ProviderNotReadyError,
    UnsupportedProviderError,
    VecboxError,
)

__version__ = "0.1.0"

__all__ = [
    "AUTO_EMBED_CANDIDATES",
    "BackendError",
    "BackendTimeoutError",
    "BatchEmbedResult",
    "Candidate",
    "CandidateFailure",
    "ConfigurationError",
    "EmbedInput",
    "EmbedResult",
    "EmbedUsage",
    "FailureCache",
    "InputError",
    "NoProviderAvailableError",
    "ProviderConfig",
    "ProviderIdentifier",
    "ProviderNotReadyError",
    "Settings",
    "UnsupportedProviderError",
    "VecboxError",
    "auto_embed",
    "create_provider",
    "embed",
    "list_supported_providers",
    "release_local_models",
]
