"""Direct dispatch: embed through one explicitly configured provider.

No fallback happens here.  If the named provider is not ready or fails,
the error is logged with the provider name and re-raised unchanged; trying
other providers is the auto-selector's job.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Sequence, Union

import structlog
from pydantic import ValidationError

from vecbox.models.embedding import BatchEmbedResult, EmbedInput, EmbedResult, ProviderConfig
from vecbox.providers.embedding.registry import create_provider
from vecbox.utils.errors import InputError, ProviderNotReadyError

logger = structlog.get_logger(logger_name=__name__)

# Anything coerce_input() accepts as a single item.
InputLike = Union[EmbedInput, str, Path, Mapping[str, Any]]


def coerce_input(item: InputLike) -> EmbedInput:
    """Normalise a single input item to :class:`EmbedInput`.

    ``str`` is literal text, ``Path`` is a file reference, and a mapping is
    validated as ``{"text": ...}`` or ``{"file_path": ...}``.
    """
    if isinstance(item, EmbedInput):
        return item
    if isinstance(item, str):
        return EmbedInput(text=item)
    if isinstance(item, Path):
        return EmbedInput(file_path=str(item))
    if isinstance(item, Mapping):
        try:
            return EmbedInput.model_validate(dict(item))
        except ValidationError as exc:
            raise InputError(message=f"Invalid input mapping: {exc.errors()[0]['msg']}") from exc
    raise InputError(message=f"Unsupported input type: {type(item).__name__}")


def is_batch(inputs: Any) -> bool:
    """A list or tuple is a batch; everything else is a single item."""
    return isinstance(inputs, (list, tuple))


async def embed(
    config: ProviderConfig,
    inputs: InputLike | Sequence[InputLike],
) -> EmbedResult | BatchEmbedResult:
    """Embed *inputs* with the provider named in *config*.

    A list or tuple goes to ``embed_batch`` and yields a
    :class:`BatchEmbedResult`; a single item yields an :class:`EmbedResult`.

    Raises
    ------
    UnsupportedProviderError, ConfigurationError
        From the registry, before any network activity.
    ProviderNotReadyError
        If the provider's readiness probe returns ``False``.
    InputError, BackendError
        From the provider, unchanged.
    """
    try:
        provider = create_provider(config)
    except Exception as exc:
        logger.error("embedding_failed", provider=config.provider, stage="create", error=str(exc))
        raise

    name = provider.get_provider_name()
    try:
        if not await provider.is_ready():
            raise ProviderNotReadyError(
                message=f"Provider {name} is not ready",
                provider_name=name,
            )

        if is_batch(inputs):
            items = [coerce_input(item) for item in inputs]
            logger.debug("embedding_dispatch", provider=name, batch_size=len(items))
            return await provider.embed_batch(items)

        logger.debug("embedding_dispatch", provider=name, batch_size=1)
        return await provider.embed(coerce_input(inputs))
    except Exception as exc:
        logger.error("embedding_failed", provider=name, error=str(exc), error_type=type(exc).__name__)
        raise
    finally:
        await provider.close()
