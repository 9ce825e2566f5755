from __future__ import annotations

from flask_wtf import FlaskForm
from wtforms import StringField
from wtforms.validators import DataRequired, Length


def _as_text(value):
    # JSON bodies may carry PINs as numbers; PINs are compared as sent, never trimmed
    if value is None:
        return None
    return str(value)


def _stripped(value):
    value = _as_text(value)
    return value.strip() if value is not None else None


class JoinForm(FlaskForm):
    # content rules (non-empty name, PIN digits) are enforced by the roster service
    name = StringField("Name", filters=[_stripped], validators=[Length(max=64)])
    pin = StringField("PIN", filters=[_as_text], validators=[Length(max=64)])


class CheckAssignmentForm(FlaskForm):
    name = StringField("Name", filters=[_stripped], validators=[Length(max=64)])
    pin = StringField("PIN", filters=[_as_text], validators=[Length(max=64)])


class AdminPinForm(FlaskForm):
    admin_pin = StringField("Admin PIN", filters=[_as_text], validators=[DataRequired(), Length(max=64)])


class ChangeAdminPinForm(AdminPinForm):
    new_pin = StringField("New admin PIN", filters=[_as_text], validators=[Length(max=64)])


def form_error_message(form: FlaskForm) -> str:
    parts = []
    for field_name, errors in form.errors.items():
        for err in errors:
            parts.append(f"{field_name}: {err}")
    return "; ".join(parts) or "Invalid input."
