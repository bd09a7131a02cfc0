"""Environment-driven configuration for vecbox."""

from vecbox.config.settings import Settings

__all__ = ["Settings"]
