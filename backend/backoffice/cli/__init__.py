"""Command-line interface registration for the Flask application."""

from __future__ import annotations

from flask import Flask

from .admin import tenants_cli, tokens_cli, users_cli


def init_app(app: Flask) -> None:
    """Register the ``tenants``, ``users`` and ``tokens`` command groups."""
    app.cli.add_command(tenants_cli)
    app.cli.add_command(users_cli)
    app.cli.add_command(tokens_cli)
