"""Agora: event coordination backend for investor-relations teams."""

__version__ = "1.0.0"
