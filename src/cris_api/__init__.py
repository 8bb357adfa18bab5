"""CRIS identity and lifecycle administration."""

__version__ = "0.1.0"
