"""Command-line interface for notioncli."""

from .main import app, main

__all__ = ["app", "main"]
