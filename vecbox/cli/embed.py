"""Standalone CLI for embedding text and checking provider setup.

Usage::

    python -m vecbox.cli embed --provider openai "some text"
    python -m vecbox.cli embed --provider fastembed -f notes.txt --json
    python -m vecbox.cli auto "first" "second"
    python -m vecbox.cli providers --check

Credentials come from the environment / ``.env`` (see :class:`Settings`)
unless ``--api-key`` is given.  Progress and errors go to stderr so stdout
carries only the result.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Sequence

from pydantic import ValidationError

from vecbox.config.settings import Settings
from vecbox.models.embedding import BatchEmbedResult, EmbedInput, EmbedResult, ProviderConfig
from vecbox.providers.embedding.local_model_cache import release_local_models
from vecbox.providers.embedding.registry import create_provider, list_supported_providers
from vecbox.services.auto_selector import AUTO_EMBED_CANDIDATES, auto_embed
from vecbox.services.dispatcher import embed
from vecbox.utils.errors import NoProviderAvailableError, VecboxError
from vecbox.utils.logging import configure_logging

_PREVIEW_VALUES = 6


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def _collect_inputs(args: argparse.Namespace) -> EmbedInput | list[EmbedInput] | None:
    """Build the input for dispatch: one item stays single, several become a batch."""
    items = [EmbedInput(text=text) for text in args.texts]
    items += [EmbedInput(file_path=path) for path in args.files]
    if not items:
        return None
    return items[0] if len(items) == 1 else items


def _format_text_output(result: EmbedResult | BatchEmbedResult) -> str:
    vectors = result.embeddings if isinstance(result, BatchEmbedResult) else [result.embedding]
    lines = [f"Provider: {result.provider}  |  Model: {result.model}  |  Dimensions: {result.dimensions}"]
    if result.usage is not None and result.usage.total_tokens is not None:
        lines.append(f"Tokens: {result.usage.total_tokens}")
    for index, vector in enumerate(vectors):
        preview = ", ".join(f"{value:.4f}" for value in vector[:_PREVIEW_VALUES])
        suffix = ", ..." if len(vector) > _PREVIEW_VALUES else ""
        lines.append(f"[{index}] [{preview}{suffix}]")
    return "\n".join(lines)


def _emit(result: EmbedResult | BatchEmbedResult, json_output: bool) -> None:
    if json_output:
        print(result.model_dump_json(indent=2))
    else:
        print(_format_text_output(result))


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


async def _handle_embed(args: argparse.Namespace, settings: Settings) -> int:
    inputs = _collect_inputs(args)
    if inputs is None:
        print("Error: give at least one text or --file", file=sys.stderr)
        return 1

    provider = args.provider.strip().lower()
    credential = args.api_key or getattr(settings, f"{provider}_api_key", "") or None
    endpoint = args.endpoint
    if endpoint is None and provider == "openai":
        endpoint = settings.openai_base_url or None
    model = args.model
    if model is None and provider == "llamacpp":
        model = settings.llamacpp_model_path or None

    try:
        config = ProviderConfig(
            provider=provider,
            model=model,
            credential=credential,
            endpoint=endpoint,
            timeout_ms=args.timeout_ms,
            dimensions=args.dimensions,
        )
        result = await embed(config, inputs)
    except (VecboxError, ValidationError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    _emit(result, args.json_output)
    return 0


async def _handle_auto(args: argparse.Namespace, settings: Settings) -> int:
    inputs = _collect_inputs(args)
    if inputs is None:
        print("Error: give at least one text or --file", file=sys.stderr)
        return 1

    try:
        result = await auto_embed(inputs, settings=settings)
    except NoProviderAvailableError as exc:
        print("Error: no embedding provider available", file=sys.stderr)
        for failure in exc.failures:
            print(f"  {failure.provider}: {failure.reason}", file=sys.stderr)
        for skipped in exc.skipped:
            print(f"  {skipped.provider}: skipped ({skipped.reason})", file=sys.stderr)
        return 1

    _emit(result, args.json_output)
    return 0


async def _handle_providers(args: argparse.Namespace, settings: Settings) -> int:
    configured = set(settings.get_available_embedding_providers())
    print("Supported providers (auto-selection order):")
    for candidate in AUTO_EMBED_CANDIDATES:
        name = candidate.provider.value
        status = "configured" if name in configured else "not configured"
        if args.check and name in configured:
            status = "ready" if await _probe(candidate.build_config(settings)) else "not ready"
        print(f"  {name:<10} {status}")
    return 0


async def _probe(config: ProviderConfig) -> bool:
    try:
        provider = create_provider(config)
    except VecboxError as exc:
        print(f"  {config.provider}: {exc}", file=sys.stderr)
        return False
    try:
        return await provider.is_ready()
    finally:
        await provider.close()


_HANDLERS = {
    "embed": _handle_embed,
    "auto": _handle_auto,
    "providers": _handle_providers,
}


async def _run(args: argparse.Namespace, settings: Settings) -> int:
    try:
        return await _HANDLERS[args.command](args, settings)
    finally:
        release_local_models()


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def _add_input_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("texts", nargs="*", help="Literal text to embed.")
    parser.add_argument(
        "--file", "-f",
        action="append",
        default=[],
        dest="files",
        help="UTF-8 text file to embed (repeatable).",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Print the result as JSON.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m vecbox.cli",
        description="Embed text with OpenAI, Gemini, Mistral, DeepSeek, fastembed or llama.cpp.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Suppress log output (implied by --json).",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    embed_parser = subparsers.add_parser("embed", help="Embed with one named provider")
    embed_parser.add_argument(
        "--provider", "-p",
        required=True,
        help=f"Provider identifier ({', '.join(p.value for p in list_supported_providers())}).",
    )
    embed_parser.add_argument("--model", "-m", default=None, help="Model name or GGUF file.")
    embed_parser.add_argument("--api-key", default=None, help="Overrides the key from the environment.")
    embed_parser.add_argument("--endpoint", default=None, help="Base URL override.")
    embed_parser.add_argument("--dimensions", type=int, default=None, help="Declared vector width.")
    embed_parser.add_argument("--timeout-ms", type=int, default=30_000, help="Per-call timeout.")
    _add_input_arguments(embed_parser)

    auto_parser = subparsers.add_parser("auto", help="Embed with the first provider that works")
    _add_input_arguments(auto_parser)

    providers_parser = subparsers.add_parser("providers", help="List providers and their status")
    providers_parser.add_argument(
        "--check",
        action="store_true",
        help="Probe each configured provider for readiness.",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point.  Exits 0 on success, 1 on any error."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    settings = Settings()
    # Logs go to stderr; --json implies --quiet so stdout stays parseable.
    quiet = args.quiet or getattr(args, "json_output", False)
    configure_logging(log_level="WARNING" if quiet else settings.log_level, stream=sys.stderr)

    exit_code = asyncio.run(_run(args, settings))
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
