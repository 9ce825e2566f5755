from __future__ import annotations

from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy
from flask_wtf.csrf import CSRFProtect
from sqlalchemy import MetaData

# Constraint names stay stable across migrations, e.g. ck_participants_not_self_assigned
CONSTRAINT_NAMES = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}

db = SQLAlchemy(metadata=MetaData(naming_convention=CONSTRAINT_NAMES))
migrate = Migrate()
csrf = CSRFProtect()


def engine_options(database_uri: str, lock_timeout: float) -> dict:
    """
    Engine options for the roster store.

    SQLite writers wait on the database lock for at most lock_timeout seconds
    before the driver gives up with "database is locked".
    """
    if database_uri.startswith("sqlite"):
        return {"connect_args": {"timeout": lock_timeout}}
    return {"pool_pre_ping": True}
