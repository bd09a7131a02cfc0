"""Unit tests for FailureCache."""

from __future__ import annotations

import pytest

from vecbox.services.failure_cache import FailureCache


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def test_suppressed_until_ttl_expires() -> None:
    clock = _Clock()
    cache = FailureCache(ttl_seconds=10, clock=clock)

    cache.record_failure("openai")
    clock.now = 9.9
    assert cache.is_suppressed("openai") is True

    clock.now = 10.0
    assert cache.is_suppressed("openai") is False
    assert len(cache) == 0


def test_success_clears_entry() -> None:
    cache = FailureCache(ttl_seconds=10, clock=_Clock())
    cache.record_failure("gemini")
    cache.record_success("gemini")
    assert cache.is_suppressed("gemini") is False


def test_unknown_provider_not_suppressed() -> None:
    assert FailureCache().is_suppressed("mistral") is False


def test_zero_ttl_never_suppresses() -> None:
    cache = FailureCache(ttl_seconds=0, clock=_Clock())
    cache.record_failure("openai")
    assert cache.is_suppressed("openai") is False


def test_clear() -> None:
    cache = FailureCache(clock=_Clock())
    cache.record_failure("openai")
    cache.record_failure("gemini")
    assert len(cache) == 2
    cache.clear()
    assert len(cache) == 0


def test_negative_ttl_rejected() -> None:
    with pytest.raises(ValueError):
        FailureCache(ttl_seconds=-1)
