"""Pytest configuration and fixtures."""

import pytest

from santadraw import create_app
from santadraw.extensions import db
from santadraw.services import roster


ADMIN_PIN = "1234"


@pytest.fixture
def app(tmp_path):
    """App bound to a throwaway SQLite file, with its app context pushed."""
    app = create_app({
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'santadraw-test.db'}",
        "WTF_CSRF_ENABLED": False,
        "SANTA_DEFAULT_ADMIN_PIN": ADMIN_PIN,
        "LOG_LEVEL": "WARNING",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def three_joined(app):
    """Ana, Luis and Marta joined with PINs 1111, 2222 and 3333."""
    return [
        roster.join("Ana", "1111"),
        roster.join("Luis", "2222"),
        roster.join("Marta", "3333"),
    ]
