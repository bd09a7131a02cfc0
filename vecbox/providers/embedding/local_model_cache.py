"""Process-wide cache of loaded local models.

Provider instances are created fresh for every dispatch, but loading an
ONNX or GGUF model takes seconds, so the loaded model itself is held once
per process in a :class:`LocalModelHandle`.  Native inference objects are
not assumed to be thread-safe: the handle serialises loading and every call
through one lock, and runs them in a worker thread so the event loop is
never blocked.

Applications call :func:`release_local_models` at shutdown.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Any, Callable, TypeVar

import structlog

from vecbox.utils.errors import BackendError

logger = structlog.get_logger(logger_name=__name__)

_T = TypeVar("_T")

_HANDLES: dict[str, LocalModelHandle] = {}
_HANDLES_LOCK = threading.Lock()


class LocalModelHandle:
    """One lazily loaded model with serialised access.

    A failed load is remembered: :meth:`ensure_loaded` keeps returning
    ``False`` and :meth:`run` keeps raising ``BackendError`` until the handle
    is closed, so a broken model never crashes a caller on first use.
    """

    def __init__(
        self,
        key: str,
        loader: Callable[[], Any],
        closer: Callable[[Any], None] | None = None,
    ) -> None:
        self._key = key
        self._loader = loader
        self._closer = closer
        self._lock = threading.Lock()
        self._model: Any = None
        self._load_error: BaseException | None = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def is_loaded(self) -> bool:
        return self._model is not None

    @property
    def load_error(self) -> BaseException | None:
        return self._load_error

    async def ensure_loaded(self, timeout: float | None = None) -> bool:
        """Load the model if needed; return whether it is usable.  Never raises.

        With *timeout* (seconds), a load still running when it expires
        reports ``False``.  The load carries on in its worker thread and a
        later call sees the result.
        """
        if self._model is not None:
            return True
        if self._load_error is not None:
            return False
        try:
            return await asyncio.wait_for(asyncio.to_thread(self._load_quietly), timeout)
        except asyncio.TimeoutError:
            logger.warning("local_model_load_pending", key=self._key, timeout_seconds=timeout)
            return False

    async def run(self, fn: Callable[[Any], _T]) -> _T:
        """Call ``fn(model)`` in a worker thread while holding the handle lock."""

        def _call() -> _T:
            with self._lock:
                return fn(self._load_locked())

        return await asyncio.to_thread(_call)

    def close(self) -> None:
        """Release the native model and forget any recorded load failure."""
        with self._lock:
            model, self._model = self._model, None
            self._load_error = None
            if model is not None and self._closer is not None:
                self._closer(model)
        logger.info("local_model_released", key=self._key)

    # ------------------------------------------------------------------

    def _load_quietly(self) -> bool:
        with self._lock:
            try:
                self._load_locked()
            except BackendError:
                return False
            return True

    def _load_locked(self) -> Any:
        # Caller holds self._lock.
        if self._model is not None:
            return self._model
        if self._load_error is not None:
            raise BackendError(
                message=f"Model '{self._key}' previously failed to load: {self._load_error}"
            )
        logger.info("loading_local_model", key=self._key)
        try:
            self._model = self._loader()
        except Exception as exc:  # noqa: BLE001
            self._load_error = exc
            logger.error("local_model_load_failed", key=self._key, error=str(exc))
            raise BackendError(message=f"Failed to load model '{self._key}': {exc}") from exc
        logger.info("local_model_loaded", key=self._key)
        return self._model


def get_local_model(
    key: str,
    loader: Callable[[], Any],
    closer: Callable[[Any], None] | None = None,
) -> LocalModelHandle:
    """Return the cached handle for *key*, registering a new one if absent.

    The model is not loaded here; loading happens on first readiness probe
    or first call.
    """
    with _HANDLES_LOCK:
        handle = _HANDLES.get(key)
        if handle is None:
            handle = LocalModelHandle(key, loader, closer)
            _HANDLES[key] = handle
        return handle


def release_local_models() -> int:
    """Close and forget every cached local model.  Returns how many were released.

    A failure closing one model is logged and does not stop the others from
    being released.
    """
    with _HANDLES_LOCK:
        handles = list(_HANDLES.values())
        _HANDLES.clear()

    for handle in handles:
        try:
            handle.close()
        except Exception as exc:  # noqa: BLE001
            logger.error("local_model_release_failed", key=handle.key, error=str(exc))
    return len(handles)
