"""Resolve an :class:`EmbedInput` to the text that will be embedded."""

from __future__ import annotations

import asyncio
from pathlib import Path

from vecbox.models.embedding import EmbedInput
from vecbox.utils.errors import InputError


async def read_input(embed_input: EmbedInput, provider_name: str | None = None) -> str:
    """Return the text for *embed_input*.

    Literal ``text`` is returned verbatim.  A ``file_path`` is read as UTF-8
    off the event loop.  Text that is empty after stripping is rejected so
    that no backend is ever asked to embed nothing.

    Raises
    ------
    InputError
        If the file cannot be read or decoded, or the text is blank.
    """
    if embed_input.text is not None:
        text = embed_input.text
        source = "text"
    else:
        path = Path(embed_input.file_path)
        try:
            text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise InputError(
                message=f"Cannot read input file '{path}': {exc}",
                provider_name=provider_name,
            ) from exc
        source = f"file '{path}'"

    if not text.strip():
        raise InputError(
            message=f"Input {source} is empty or whitespace-only",
            provider_name=provider_name,
        )
    return text
