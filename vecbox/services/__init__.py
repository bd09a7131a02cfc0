"""Dispatch services: direct ``embed`` and fallback ``auto_embed``."""

from vecbox.services.auto_selector import AUTO_EMBED_CANDIDATES, Candidate, auto_embed
from vecbox.services.dispatcher import embed
from vecbox.services.failure_cache import FailureCache

__all__ = ["AUTO_EMBED_CANDIDATES", "Candidate", "FailureCache", "auto_embed", "embed"]
