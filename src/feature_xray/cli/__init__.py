"""Command line interface."""

from feature_xray.cli.main import app, main

__all__ = ["app", "main"]
