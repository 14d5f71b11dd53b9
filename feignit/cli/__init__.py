"""Command-line interface for feignit."""

from .main import main

__all__ = ["main"]
