"""Persistence layer for bare-metal infrastructure entities."""

__version__ = "0.1.0"
