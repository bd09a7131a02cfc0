"""Pydantic models shared by providers, the dispatcher and the auto-selector."""

from vecbox.models.embedding import (
    BatchEmbedResult,
    EmbedInput,
    EmbedResult,
    EmbedUsage,
    ProviderConfig,
    ProviderIdentifier,
)

__all__ = [
    "BatchEmbedResult",
    "EmbedInput",
    "EmbedResult",
    "EmbedUsage",
    "ProviderConfig",
    "ProviderIdentifier",
]
