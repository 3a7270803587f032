"""Compact encrypted caller identity tokens."""

__version__ = "0.1.0"
