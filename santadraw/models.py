from __future__ import annotations

from datetime import datetime, timezone

from flask import current_app
from sqlalchemy import update

from .extensions import db
from .security import hash_pin


def utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def name_key(name: str) -> str:
    return name.strip().casefold()


class Participant(db.Model):
    __tablename__ = "participants"
    __table_args__ = (
        db.CheckConstraint(
            "assigned_to_id IS NULL OR assigned_to_id <> id",
            name="not_self_assigned",
        ),
        {"sqlite_autoincrement": True},
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=False)
    # casefolded name; the unique index is what makes duplicate joins lose a race
    name_key = db.Column(db.String(64), unique=True, nullable=False)

    # argon2 hash of the participant PIN
    pin_hash = db.Column(db.String(255), nullable=False)

    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    assigned_to_id = db.Column(db.Integer, db.ForeignKey("participants.id", ondelete="SET NULL"), nullable=True)
    assigned_to = db.relationship(
        "Participant",
        remote_side=[id],
        foreign_keys=[assigned_to_id],
        uselist=False,
        post_update=True,
    )

    def to_public(self) -> dict:
        """Only what any caller may see: never the PIN or the assignment."""
        return {"id": self.id, "name": self.name}

    def __repr__(self) -> str:
        return f"<Participant {self.id} {self.name!r}>"


class DrawState(db.Model):
    __tablename__ = "draw_state"

    id = db.Column(db.Integer, primary_key=True)
    admin_pin_hash = db.Column(db.String(255), nullable=False)
    is_drawn = db.Column(db.Boolean, default=False, nullable=False)
    drawn_at = db.Column(db.DateTime, nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    @classmethod
    def get_singleton(cls, lock: bool = False) -> "DrawState":
        """
        Returns the single state row, creating it on first access.

        With lock=True the first statement is a write to draw_state, so the
        transaction holds the database write lock (SQLite RESERVED lock, row locks
        elsewhere) before anything is read. The row is then selected FOR UPDATE and
        a freshly created row is only flushed, leaving the commit to the caller.
        """
        q = cls.query.order_by(cls.id.asc())
        if lock:
            db.session.execute(
                update(cls).values(updated_at=utcnow()),
                execution_options={"synchronize_session": False},
            )
            q = q.with_for_update()
        obj = q.first()
        if not obj:
            default_pin = str(current_app.config.get("SANTA_DEFAULT_ADMIN_PIN") or "1234")
            obj = cls(admin_pin_hash=hash_pin(default_pin), is_drawn=False)
            db.session.add(obj)
            if lock:
                db.session.flush()
            else:
                db.session.commit()
        return obj
