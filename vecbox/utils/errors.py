"""Custom exception hierarchy for vecbox.

All library exceptions inherit from :class:`VecboxError`, which carries an
optional ``provider_name`` so callers and log handlers can identify which
embedding backend (e.g. "openai", "fastembed") caused the failure.

    VecboxError  (base -- catch-all for any vecbox error)
    +-- ConfigurationError        (invalid or incomplete ProviderConfig)
    +-- UnsupportedProviderError  (identifier not in the registry)
    +-- InputError                (empty or unreadable EmbedInput)
    +-- ProviderNotReadyError     (readiness probe returned False)
    +-- BackendError              (backend call failed / bad response shape)
    |   +-- BackendTimeoutError   (backend call exceeded timeout_ms)
    +-- NoProviderAvailableError  (auto_embed exhausted every candidate)

Only the auto-selector recovers from these, and only by trying the next
provider.  ``ConfigurationError``, ``UnsupportedProviderError`` and
``InputError`` are never retried by the library.
"""

from __future__ import annotations

from dataclasses import dataclass


class VecboxError(Exception):
    """Base exception for all vecbox errors.

    The ``__str__`` method prefixes the provider name in brackets for
    structured log output, e.g. ``[openai] API error: 401 Unauthorized``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Caller-side errors (never retried)
# ---------------------------------------------------------------------------

class ConfigurationError(VecboxError):
    """Raised when a ProviderConfig is invalid or missing a mandatory field."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class UnsupportedProviderError(VecboxError):
    """Raised when a provider identifier is not present in the registry."""

    def __init__(
        self,
        message: str = "Unsupported embedding provider",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class InputError(VecboxError):
    """Raised when an EmbedInput resolves to empty text or cannot be read."""

    def __init__(
        self,
        message: str = "Input resolved to empty text",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Provider / backend errors
# ---------------------------------------------------------------------------

class ProviderNotReadyError(VecboxError):
    """Raised by the dispatcher when a provider's readiness probe fails.

    The auto-selector treats this like any other candidate failure and
    moves on to the next provider in priority order.
    """

    def __init__(
        self,
        message: str = "Embedding provider is not ready",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class BackendError(VecboxError):
    """Raised when the wrapped backend fails or returns an unusable embedding."""

    def __init__(
        self,
        message: str = "Embedding backend call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class BackendTimeoutError(BackendError):
    """Raised when a backend call exceeds the configured ``timeout_ms``."""

    def __init__(
        self,
        message: str = "Embedding backend call timed out",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Auto-selection
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CandidateFailure:
    """One auto-selector candidate that was skipped or attempted and failed."""

    provider: str
    reason: str
    error: BaseException | None = None


class NoProviderAvailableError(VecboxError):
    """Raised by ``auto_embed`` when every candidate was skipped or failed.

    ``failures`` lists the candidates that were attempted, in priority order,
    each with the reason it failed.  ``skipped`` lists the candidates that
    were never attempted (missing credential, recently failed).
    """

    def __init__(
        self,
        failures: list[CandidateFailure] | None = None,
        skipped: list[CandidateFailure] | None = None,
    ) -> None:
        self._failures = list(failures or [])
        self._skipped = list(skipped or [])
        super().__init__(message=self._build_message())

    @property
    def failures(self) -> list[CandidateFailure]:
        return list(self._failures)

    @property
    def skipped(self) -> list[CandidateFailure]:
        return list(self._skipped)

    def _build_message(self) -> str:
        if not self._failures and not self._skipped:
            return "No embedding provider available: no candidates configured"
        parts = [f"{f.provider}: {f.reason}" for f in self._failures]
        parts += [f"{s.provider}: skipped ({s.reason})" for s in self._skipped]
        return "No embedding provider available -- " + "; ".join(parts)
