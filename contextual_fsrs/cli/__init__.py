"""Command-line interface for the contextual FSRS engine."""

from contextual_fsrs.cli.main import app, run

__all__ = ["app", "run"]
