"""Shared pytest fixtures for the vecbox test suite."""

from __future__ import annotations

from typing import Callable
from unittest.mock import patch

import pytest

from vecbox.config.settings import Settings
from vecbox.models.embedding import ProviderConfig, ProviderIdentifier
from vecbox.providers.embedding.base import BackendEmbedding, BaseEmbeddingProvider
from vecbox.providers.embedding.local_model_cache import release_local_models

# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeEmbeddingProvider(BaseEmbeddingProvider):
    """In-memory provider that goes through the real BaseEmbeddingProvider path.

    Behaviour is set per subclass (see ``make_fake_provider``); every
    instance, readiness probe and backend call is recorded on the class so
    tests can assert invocation counts.
    """

    _identifier = ProviderIdentifier.OPENAI
    _default_model = "fake-model"
    _default_dimension = 3

    ready: bool = True
    fail_with: BaseException | None = None
    vectorize: Callable[[str], list[float]] = staticmethod(lambda text: [0.1, 0.2, 0.3])

    instances: list[FakeEmbeddingProvider]
    ready_checks: int
    backend_calls: list[list[str]]
    closed: int

    def __init__(self, config: ProviderConfig) -> None:
        super().__init__(config)
        type(self).instances.append(self)

    async def is_ready(self) -> bool:
        type(self).ready_checks += 1
        return type(self).ready

    async def close(self) -> None:
        type(self).closed += 1

    async def _embed_texts(self, texts: list[str]) -> BackendEmbedding:
        type(self).backend_calls.append(list(texts))
        if type(self).fail_with is not None:
            raise type(self).fail_with
        return BackendEmbedding(vectors=[type(self).vectorize(text) for text in texts])


def make_fake_provider(
    identifier: ProviderIdentifier,
    *,
    ready: bool = True,
    fail_with: BaseException | None = None,
    dimension: int = 3,
    vectorize: Callable[[str], list[float]] | None = None,
) -> type[FakeEmbeddingProvider]:
    """Build a fresh FakeEmbeddingProvider subclass with its own call log."""
    attrs = {
        "_identifier": identifier,
        "_default_dimension": dimension,
        "ready": ready,
        "fail_with": fail_with,
        "instances": [],
        "ready_checks": 0,
        "backend_calls": [],
        "closed": 0,
    }
    if vectorize is not None:
        attrs["vectorize"] = staticmethod(vectorize)
    return type(f"Fake{identifier.value.title()}Provider", (FakeEmbeddingProvider,), attrs)


@pytest.fixture
def register_fakes():
    """Replace registry entries with fakes for the duration of a test.

    Usage: ``register_fakes({ProviderIdentifier.OPENAI: make_fake_provider(...)})``.
    Identifiers not passed keep their real adapter.
    """
    patchers = []

    def _register(fakes: dict[ProviderIdentifier, type]) -> None:
        patcher = patch.dict("vecbox.providers.embedding.registry._PROVIDERS", fakes)
        patcher.start()
        patchers.append(patcher)

    yield _register

    for patcher in reversed(patchers):
        patcher.stop()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


def make_settings(**overrides) -> Settings:
    """Build Settings with every credential empty unless overridden.

    All fields are passed explicitly so the developer's environment and
    ``.env`` cannot leak into a test.
    """
    defaults = {
        "openai_api_key": "",
        "openai_base_url": "",
        "gemini_api_key": "",
        "mistral_api_key": "",
        "deepseek_api_key": "",
        "llamacpp_model_path": "",
        "model_search_dirs": "",
        "app_env": "test",
        "log_level": "INFO",
    }
    defaults.update(overrides)
    return Settings(**defaults)


@pytest.fixture(autouse=True)
def _release_local_models():
    """Keep the process-wide local model cache empty between tests."""
    yield
    release_local_models()
