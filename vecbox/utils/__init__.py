"""Utility modules for vecbox.

- **errors** -- exception hierarchy rooted at VecboxError; each failure kind
  has its own subclass so the auto-selector and callers can react precisely.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
- **input_reader** -- resolves an EmbedInput (literal text or file path) to
  the text that is sent to the backend.
- **model_paths** -- ordered probing of install layouts for local model files.
"""

# -- Exception hierarchy ----------------------------------------------------
from vecbox.utils.errors import (
    BackendError,
    BackendTimeoutError,
    CandidateFailure,
    ConfigurationError,
    InputError,
    NoProviderAvailableError,
    ProviderNotReadyError,
    UnsupportedProviderError,
    VecboxError,
)

# -- Input resolution -------------------------------------------------------
from vecbox.utils.input_reader import read_input

# -- Structured logging setup -----------------------------------------------
from vecbox.utils.logging import configure_logging, get_logger

# -- Local model file lookup ------------------------------------------------
from vecbox.utils.model_paths import ModelPathResolver

__all__ = [
    "BackendError",
    "BackendTimeoutError",
    "CandidateFailure",
    "ConfigurationError",
    "InputError",
    "ModelPathResolver",
    "NoProviderAvailableError",
    "ProviderNotReadyError",
    "UnsupportedProviderError",
    "VecboxError",
    "configure_logging",
    "get_logger",
    "read_input",
]
