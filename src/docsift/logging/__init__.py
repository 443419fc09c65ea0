"""Logging package -- JSON rotating file + console handlers."""

from .setup import setup_logging

__all__ = ["setup_logging"]
