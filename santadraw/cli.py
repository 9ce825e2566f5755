from __future__ import annotations

import click
from flask import Flask

from .extensions import db
from .models import DrawState


def register_commands(app: Flask) -> None:
    @app.cli.command("init-db")
    def init_db():
        """Create the tables and the draw state row."""
        db.create_all()
        state = DrawState.get_singleton()
        click.echo(f"Database ready (draw state #{state.id}, drawn: {state.is_drawn}).")
