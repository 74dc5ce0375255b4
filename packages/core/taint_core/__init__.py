"""Core models and rule loading for taint-audit."""

__version__ = "0.1.0"
