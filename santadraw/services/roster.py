from __future__ import annotations

import logging
import threading
from contextlib import contextmanager

from flask import current_app
from sqlalchemy import exc as sa_exc

from ..errors import (
    AssignmentMissing,
    DrawAlreadyDone,
    DrawNotYetDone,
    DuplicateName,
    InsufficientParticipants,
    InvalidName,
    NotFoundOrBadCredentials,
    ParticipantNotFound,
    StoreBusy,
    WeakNewPin,
    WeakPin,
)
from ..extensions import db
from ..models import DrawState, Participant, name_key, utcnow
from ..policies import require_admin_pin
from ..security import hash_pin, is_valid_pin, verify_pin
from .draw import MIN_PARTICIPANTS, draw


logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 64

# One writer per process; the write to draw_state at the start of every
# transition serialises writers across processes.
_writer_lock = threading.RLock()


@contextmanager
def state_transition():
    """
    Runs one mutation as a unit: takes the writer lock, locks the DrawState row,
    yields it, then commits. Any exception rolls everything back.
    """
    timeout = float(current_app.config.get("SANTA_LOCK_TIMEOUT", 10))
    if not _writer_lock.acquire(timeout=timeout):
        raise StoreBusy()
    try:
        # drop anything loaded before we held the lock
        db.session.expire_all()
        try:
            state = DrawState.get_singleton(lock=True)
            yield state
            db.session.commit()
        except sa_exc.OperationalError as e:
            db.session.rollback()
            logger.error("Store rejected transition: %s", e)
            raise StoreBusy() from e
        except Exception:
            db.session.rollback()
            raise
    finally:
        _writer_lock.release()


def _ordered_participants():
    return Participant.query.order_by(Participant.created_at.asc(), Participant.id.asc())


# --------- Open operations ----------

def join(name: str | None, pin: str | None) -> Participant:
    name = (name or "").strip()
    if not name:
        raise InvalidName()
    if len(name) > MAX_NAME_LENGTH:
        raise InvalidName(f"Name must be at most {MAX_NAME_LENGTH} characters.")
    if not is_valid_pin(pin):
        raise WeakPin()

    key = name_key(name)
    pin_hash = hash_pin(pin)

    with state_transition() as state:
        if Participant.query.filter_by(name_key=key).first():
            raise DuplicateName()
        if state.is_drawn:
            raise DrawAlreadyDone("The draw has already been done, joining is closed.")

        p = Participant(name=name, name_key=key, pin_hash=pin_hash)
        db.session.add(p)
        try:
            db.session.flush()
        except sa_exc.IntegrityError as e:
            raise DuplicateName() from e
        participant_id = p.id

    logger.info("Participant %s joined as %r", participant_id, name)
    return p


def check_assignment(name: str | None, pin: str | None) -> str:
    """Returns the name of the person this participant gives a gift to."""
    key = name_key(name or "")
    p = Participant.query.filter_by(name_key=key).first() if key else None
    if not p or not verify_pin(pin, p.pin_hash):
        raise NotFoundOrBadCredentials()

    state = DrawState.get_singleton()
    if not state.is_drawn:
        raise DrawNotYetDone()

    recipient = db.session.get(Participant, p.assigned_to_id) if p.assigned_to_id else None
    if recipient is None:
        logger.error("Participant %s has no assignment after the draw", p.id)
        raise AssignmentMissing()
    return recipient.name


def list_participants() -> list[dict]:
    return [p.to_public() for p in _ordered_participants().all()]


def get_status() -> dict:
    state = DrawState.get_singleton()
    count = Participant.query.count()
    return {
        "is_drawn": state.is_drawn,
        "drawn_at": state.drawn_at.isoformat() if state.drawn_at else None,
        "participant_count": count,
        "min_participants": MIN_PARTICIPANTS,
        "can_draw": not state.is_drawn and count >= MIN_PARTICIPANTS,
    }


# --------- Admin operations ----------

def remove_participant(participant_id: int, admin_pin: str | None) -> None:
    with state_transition() as state:
        require_admin_pin(state, admin_pin, "remove participant")
        if state.is_drawn:
            raise DrawAlreadyDone("Cannot remove participants after the draw.")

        p = db.session.get(Participant, participant_id)
        if p is None:
            raise ParticipantNotFound()
        removed_name = p.name
        db.session.delete(p)

    logger.info("Participant %s (%r) removed", participant_id, removed_name)


def wipe_all(admin_pin: str | None) -> int:
    """Removes every participant; a completed draw is reset along with them."""
    with state_transition() as state:
        require_admin_pin(state, admin_pin, "wipe")
        was_drawn = state.is_drawn
        if was_drawn:
            Participant.query.update({Participant.assigned_to_id: None}, synchronize_session=False)
        removed = Participant.query.delete(synchronize_session=False)
        if was_drawn:
            state.is_drawn = False
            state.drawn_at = None

    logger.info("Wiped %d participants (draw reset: %s)", removed, was_drawn)
    return removed


def perform_draw(admin_pin: str | None, strategy: str | None = None, rng=None) -> None:
    strategy = strategy or current_app.config.get("SANTA_DRAW_STRATEGY", "cycle")

    with state_transition() as state:
        require_admin_pin(state, admin_pin, "draw")
        if state.is_drawn:
            raise DrawAlreadyDone()

        people = _ordered_participants().all()
        if len(people) < MIN_PARTICIPANTS:
            raise InsufficientParticipants(
                f"Need at least {MIN_PARTICIPANTS} participants, have {len(people)}."
            )

        assignment = draw([p.id for p in people], strategy=strategy, rng=rng)
        for p in people:
            p.assigned_to_id = assignment[p.id]

        state.is_drawn = True
        state.drawn_at = utcnow()

    logger.info("Draw complete for %d participants (%s strategy)", len(people), strategy)


def reset_draw(admin_pin: str | None) -> None:
    with state_transition() as state:
        require_admin_pin(state, admin_pin, "reset")
        Participant.query.update({Participant.assigned_to_id: None}, synchronize_session=False)
        state.is_drawn = False
        state.drawn_at = None

    logger.info("Draw reset")


def update_admin_pin(old_pin: str | None, new_pin: str | None) -> None:
    with state_transition() as state:
        require_admin_pin(state, old_pin, "admin PIN change")
        if not is_valid_pin(new_pin):
            raise WeakNewPin()
        state.admin_pin_hash = hash_pin(new_pin)

    logger.info("Admin PIN changed")
