"""Concrete adapters for external backends."""
