"""Command line interface for rancher_client."""

from .main import app, main


__all__ = ["app", "main"]
