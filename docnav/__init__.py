"""Versioned API documentation index and version registry."""

__version__ = "0.4.0"
