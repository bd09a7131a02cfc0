"""Locate local model files across the usual install layouts.

A model may be referenced by absolute path, by a path relative to the
working directory, or by bare file name.  :class:`ModelPathResolver` probes
an ordered list of candidate locations and returns the first file that
exists.  It knows nothing about providers; the llama.cpp adapter is its
only consumer.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from vecbox.utils.errors import ConfigurationError

_PACKAGE_DIR = Path(__file__).resolve().parent.parent

# Relative to the working directory, probed in this order after the
# name itself.
_DEFAULT_SEARCH_DIRS: tuple[str, ...] = (
    "models",
    "core/models",
    "llama.cpp/models",
)


class ModelPathResolver:
    """Resolve a model name to an absolute path.

    Probe order: the name as given, the default working-directory
    subdirectories, each of *search_dirs*, then ``<package>/models``.
    """

    def __init__(self, search_dirs: Iterable[str | Path] = ()) -> None:
        self._search_dirs = [Path(d).expanduser() for d in search_dirs]

    def candidates(self, name: str) -> list[Path]:
        """Return every location that would be probed for *name*, in order."""
        requested = Path(name).expanduser()
        if requested.is_absolute():
            return [requested]

        paths = [requested]
        paths += [Path(d) / requested for d in _DEFAULT_SEARCH_DIRS]
        paths += [d / requested for d in self._search_dirs]
        paths.append(_PACKAGE_DIR / "models" / requested)
        return paths

    def resolve(self, name: str) -> Path:
        """Return the first existing candidate for *name* as an absolute path.

        Raises
        ------
        ConfigurationError
            If no candidate exists.  A location that cannot be inspected
            (name too long, permission denied) counts as missing.
        """
        for path in self.candidates(name):
            try:
                found = path.is_file()
            except OSError:
                continue
            if found:
                return path.resolve()
        raise ConfigurationError(
            message=f"Model file not found: {name}",
            provider_name="llamacpp",
        )
