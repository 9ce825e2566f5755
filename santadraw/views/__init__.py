from __future__ import annotations

import logging

from flask import Flask, jsonify
from flask_wtf.csrf import CSRFError

from ..errors import SantaError


logger = logging.getLogger(__name__)


def ok(status: int = 200, **payload):
    return jsonify(ok=True, **payload), status


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(SantaError)
    def handle_santa_error(e: SantaError):
        if e.status_code >= 500:
            logger.error("%s: %s", e.code, e.message)
        return jsonify(ok=False, error=e.to_dict()), e.status_code

    @app.errorhandler(CSRFError)
    def handle_csrf_error(e: CSRFError):
        error = {"code": "CSRFError", "kind": "ValidationError", "message": e.description}
        return jsonify(ok=False, error=error), 400
