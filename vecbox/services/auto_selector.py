"""Auto-selection: embed with the first provider that works.

Candidates are evaluated strictly in the order of
:data:`AUTO_EMBED_CANDIDATES`.  Local backends come first (no credential,
no cost, work offline), then the hosted APIs in a fixed order.  The order is
a constant so the same environment always selects the same provider.

For each candidate:

1. If a required setting (API key, model path) is empty, it is skipped
   without being constructed.
2. If an injected :class:`FailureCache` says it failed recently, it is
   skipped.
3. Otherwise it is attempted through the dispatcher.  Any failure is
   logged and the loop moves on.  Outages (not ready, backend errors,
   timeouts) are recorded in the cache; errors caused by the request itself
   (bad input, bad configuration) are not.

The first success is returned unchanged.  No quality comparison is made
between providers: callers who need one specific embedding space should use
:func:`vecbox.services.dispatcher.embed` directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import structlog

from vecbox.config.settings import Settings
from vecbox.models.embedding import BatchEmbedResult, EmbedResult, ProviderConfig, ProviderIdentifier
from vecbox.services.dispatcher import InputLike, embed
from vecbox.services.failure_cache import FailureCache
from vecbox.utils.errors import (
    CandidateFailure,
    ConfigurationError,
    InputError,
    NoProviderAvailableError,
)

logger = structlog.get_logger(logger_name=__name__)

# Failures that say nothing about the provider's health.
_REQUEST_ERRORS = (InputError, ConfigurationError)


@dataclass(frozen=True)
class Candidate:
    """One entry of the auto-selection priority list.

    The ``*_setting`` fields name :class:`Settings` attributes.  A non-empty
    ``credential_setting`` or ``model_setting`` is required for the
    candidate to be attempted; ``endpoint_setting`` is optional.
    """

    provider: ProviderIdentifier
    model: str | None = None
    credential_setting: str | None = None
    model_setting: str | None = None
    endpoint_setting: str | None = None

    def missing_requirement(self, settings: Settings) -> str | None:
        """Return a skip reason if a required setting is empty, else ``None``."""
        for attr in (self.credential_setting, self.model_setting):
            if attr and not str(getattr(settings, attr, "") or "").strip():
                return f"{attr.upper()} not set"
        return None

    def build_config(self, settings: Settings) -> ProviderConfig:
        model = getattr(settings, self.model_setting) if self.model_setting else self.model
        credential = getattr(settings, self.credential_setting) if self.credential_setting else None
        endpoint = getattr(settings, self.endpoint_setting) if self.endpoint_setting else None
        return ProviderConfig(
            provider=self.provider.value,
            model=model or None,
            credential=credential or None,
            endpoint=endpoint or None,
        )


AUTO_EMBED_CANDIDATES: tuple[Candidate, ...] = (
    Candidate(ProviderIdentifier.LLAMACPP, model_setting="llamacpp_model_path"),
    Candidate(ProviderIdentifier.FASTEMBED, model="sentence-transformers/all-MiniLM-L6-v2"),
    Candidate(
        ProviderIdentifier.OPENAI,
        model="text-embedding-3-small",
        credential_setting="openai_api_key",
        endpoint_setting="openai_base_url",
    ),
    Candidate(ProviderIdentifier.GEMINI, model="gemini-embedding-001", credential_setting="gemini_api_key"),
    Candidate(ProviderIdentifier.MISTRAL, model="mistral-embed", credential_setting="mistral_api_key"),
    Candidate(ProviderIdentifier.DEEPSEEK, model="deepseek-chat", credential_setting="deepseek_api_key"),
)


async def auto_embed(
    inputs: InputLike | Sequence[InputLike],
    *,
    settings: Settings | None = None,
    failure_cache: FailureCache | None = None,
    candidates: Sequence[Candidate] = AUTO_EMBED_CANDIDATES,
) -> EmbedResult | BatchEmbedResult:
    """Embed *inputs* with the first candidate provider that succeeds.

    A batch is never split: the whole batch goes to the chosen provider.

    Raises
    ------
    NoProviderAvailableError
        If every candidate was skipped or failed.  Carries the per-candidate
        reasons in ``failures`` and ``skipped``.
    """
    settings = settings or Settings()
    failures: list[CandidateFailure] = []
    skipped: list[CandidateFailure] = []

    for candidate in candidates:
        name = candidate.provider.value

        missing = candidate.missing_requirement(settings)
        if missing:
            logger.debug("auto_embed_candidate_skipped", provider=name, reason=missing)
            skipped.append(CandidateFailure(provider=name, reason=missing))
            continue

        if failure_cache is not None and failure_cache.is_suppressed(name):
            logger.info("auto_embed_candidate_skipped", provider=name, reason="recently failed")
            skipped.append(CandidateFailure(provider=name, reason="recently failed"))
            continue

        logger.info("auto_embed_trying_provider", provider=name)
        try:
            result = await embed(candidate.build_config(settings), inputs)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "auto_embed_candidate_failed",
                provider=name,
                reason=str(exc),
                error_type=type(exc).__name__,
            )
            failures.append(CandidateFailure(provider=name, reason=str(exc), error=exc))
            if failure_cache is not None and not isinstance(exc, _REQUEST_ERRORS):
                failure_cache.record_failure(name)
            continue

        if failure_cache is not None:
            failure_cache.record_success(name)
        logger.info(
            "auto_embed_selected",
            provider=name,
            failed=[f.provider for f in failures],
            skipped=[s.provider for s in skipped],
        )
        return result

    logger.error(
        "auto_embed_exhausted",
        failed={f.provider: f.reason for f in failures},
        skipped={s.provider: s.reason for s in skipped},
    )
    raise NoProviderAvailableError(failures=failures, skipped=skipped)
