"""
Typed failures of the draw engine and roster operations.

Every failure the core can report is a SantaError subclass with a stable
``code`` (what went wrong) and ``kind`` (which family it belongs to). The HTTP
layer renders them; nothing below it catches them.
"""
from __future__ import annotations


class SantaError(RuntimeError):
    kind = "SantaError"
    code = "SantaError"
    status_code = 400
    default_message = "Request failed."

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self) -> dict:
        return {"code": self.code, "kind": self.kind, "message": self.message}


# --------- Validation ----------

class ValidationError(SantaError):
    kind = "ValidationError"
    code = "InvalidInput"
    default_message = "Invalid input."


class InvalidName(ValidationError):
    code = "InvalidName"
    default_message = "Name is required."


class DuplicateName(ValidationError):
    code = "DuplicateName"
    status_code = 409
    default_message = "This name is already in the list."


class WeakPin(ValidationError):
    code = "WeakPin"
    default_message = "PIN must be 4 to 12 digits."


class WeakNewPin(ValidationError):
    code = "WeakNewPin"
    default_message = "New admin PIN must be 4 to 12 digits."


# --------- Auth ----------

class AuthError(SantaError):
    kind = "AuthError"
    code = "AuthError"
    status_code = 403
    default_message = "Not authorized."


class InvalidAdminPin(AuthError):
    code = "InvalidAdminPin"
    default_message = "Invalid admin PIN."


class NotFoundOrBadCredentials(AuthError):
    code = "NotFoundOrBadCredentials"
    status_code = 401
    default_message = "Invalid name or PIN."


# --------- State ----------

class StateError(SantaError):
    kind = "StateError"
    code = "StateError"
    status_code = 409
    default_message = "Operation not allowed right now."


class DrawAlreadyDone(StateError):
    code = "DrawAlreadyDone"
    default_message = "The draw has already been done."


class DrawNotYetDone(StateError):
    code = "DrawNotYetDone"
    default_message = "The draw hasn't happened yet."


class InsufficientParticipants(StateError):
    code = "InsufficientParticipants"
    default_message = "Need at least 3 participants for a draw."


# --------- Lookup / integrity / store ----------

class NotFound(SantaError):
    kind = "NotFound"
    code = "NotFound"
    status_code = 404
    default_message = "Not found."


class ParticipantNotFound(NotFound):
    code = "NotFound"
    default_message = "No such participant."


class IntegrityError(SantaError):
    kind = "IntegrityError"
    code = "IntegrityError"
    status_code = 500
    default_message = "Stored data is inconsistent."


class AssignmentMissing(IntegrityError):
    code = "AssignmentMissing"
    default_message = "No assignment found."


class StoreBusy(SantaError):
    kind = "StoreBusy"
    code = "StoreBusy"
    status_code = 503
    default_message = "Another change is in progress, try again."
