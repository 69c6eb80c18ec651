"""Command-line interface for NightChat."""

from .app import app, main

__all__ = ["app", "main"]
