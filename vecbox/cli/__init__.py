"""Command-line tools for vecbox.

- ``python -m vecbox.cli embed`` -- embed with one named provider
- ``python -m vecbox.cli auto`` -- embed with the first provider that works
- ``python -m vecbox.cli providers`` -- list providers and, with ``--check``,
  probe the configured ones for readiness
"""
