"""Spaced-repetition vocabulary review service."""

__version__ = "0.1.0"
