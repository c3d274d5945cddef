"""Command-line interface for Pitch Trace."""

from .main import main

__all__ = ["main"]
