"""Typer command-line interface."""

from noted.interfaces.cli.app import app, run_cli

__all__ = ["app", "run_cli"]
