"""Command line interface."""

from genomicdist.cli.main import app

__all__ = ["app"]
