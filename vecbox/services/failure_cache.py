"""Time-bounded memory of recently failed providers.

Passed explicitly into :func:`vecbox.services.auto_selector.auto_embed`; it
is never module state, so unrelated callers and tests do not share it.
"""

from __future__ import annotations

import time
from typing import Callable

import structlog
from cachetools import TTLCache

logger = structlog.get_logger(logger_name=__name__)


class FailureCache:
    """Provider identifier -> time of its last failure, backed by ``cachetools.TTLCache``.

    A provider is suppressed for ``ttl_seconds`` after a recorded failure.
    A recorded success clears the entry immediately.

    Parameters
    ----------
    ttl_seconds:
        How long a failure suppresses the provider.  ``0`` disables
        suppression.
    clock:
        Monotonic time source, injectable for tests.
    max_size:
        Upper bound on tracked providers.
    """

    def __init__(
        self,
        ttl_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
        max_size: int = 256,
    ) -> None:
        if ttl_seconds < 0:
            raise ValueError("ttl_seconds must be >= 0")
        self._ttl = ttl_seconds
        self._clock = clock
        self._failed_at: TTLCache[str, float] = TTLCache(maxsize=max_size, ttl=ttl_seconds, timer=clock)

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def record_failure(self, provider: str) -> None:
        self._failed_at[provider] = self._clock()
        logger.debug("provider_failure_recorded", provider=provider, ttl_seconds=self._ttl)

    def record_success(self, provider: str) -> None:
        self._failed_at.pop(provider, None)

    def is_suppressed(self, provider: str) -> bool:
        """Return ``True`` if *provider* failed less than ``ttl_seconds`` ago."""
        return provider in self._failed_at

    def clear(self) -> None:
        self._failed_at.clear()

    def __len__(self) -> int:
        self._failed_at.expire()
        return len(self._failed_at)
