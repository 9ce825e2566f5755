from __future__ import annotations

import os
from typing import Any, Mapping

from flask import Flask

from .cli import register_commands
from .errors import SantaError
from .extensions import db, migrate, csrf, engine_options
from .logging_setup import configure_logging
from .services.draw import STRATEGIES
from .views import register_error_handlers
from .views.admin import admin_bp
from .views.public import public_bp


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def create_app(config: Mapping[str, Any] | None = None) -> Flask:
    app = Flask(__name__)

    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "dev-secret-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///santadraw.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["WTF_CSRF_ENABLED"] = _env_bool("WTF_CSRF_ENABLED", True)
    app.config["LOG_LEVEL"] = os.environ.get("LOG_LEVEL", "INFO")

    # Admin PIN the draw state starts with until the organizer changes it
    app.config["SANTA_DEFAULT_ADMIN_PIN"] = os.environ.get("SANTA_DEFAULT_ADMIN_PIN", "1234").strip()
    app.config["SANTA_DRAW_STRATEGY"] = os.environ.get("SANTA_DRAW_STRATEGY", "cycle").strip().lower()
    app.config["SANTA_LOCK_TIMEOUT"] = float(os.environ.get("SANTA_LOCK_TIMEOUT", "10"))

    if config:
        app.config.update(config)

    app.config.setdefault(
        "SQLALCHEMY_ENGINE_OPTIONS",
        engine_options(app.config["SQLALCHEMY_DATABASE_URI"], float(app.config["SANTA_LOCK_TIMEOUT"])),
    )

    if app.config["SANTA_DRAW_STRATEGY"] not in STRATEGIES:
        raise ValueError(f"SANTA_DRAW_STRATEGY must be one of {', '.join(STRATEGIES)}")

    logger = configure_logging(app)

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)

    # Blueprints
    app.register_blueprint(public_bp)
    app.register_blueprint(admin_bp)
    register_error_handlers(app)
    register_commands(app)

    logger.info("santadraw ready (strategy=%s)", app.config["SANTA_DRAW_STRATEGY"])
    return app


__all__ = ["create_app", "db", "SantaError"]
