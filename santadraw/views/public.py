from __future__ import annotations

from flask import Blueprint
from flask.views import MethodView
from flask_wtf.csrf import generate_csrf

from ..errors import ValidationError
from ..forms import CheckAssignmentForm, JoinForm, form_error_message
from ..services import roster
from . import ok


public_bp = Blueprint("public", __name__)


class StatusView(MethodView):
    def get(self):
        return ok(state=roster.get_status())


class ParticipantsView(MethodView):
    def get(self):
        return ok(participants=roster.list_participants())


class CsrfTokenView(MethodView):
    """Browser clients fetch this once and send it back as X-CSRFToken."""
    def get(self):
        return ok(csrf_token=generate_csrf())


class JoinView(MethodView):
    def post(self):
        form = JoinForm()
        if not form.validate():
            raise ValidationError(form_error_message(form))

        p = roster.join(form.name.data, form.pin.data)
        return ok(201, participant=p.to_public())


class CheckAssignmentView(MethodView):
    def post(self):
        form = CheckAssignmentForm()
        if not form.validate():
            raise ValidationError(form_error_message(form))

        recipient = roster.check_assignment(form.name.data, form.pin.data)
        return ok(recipient=recipient)


public_bp.add_url_rule("/", view_func=StatusView.as_view("status"))
public_bp.add_url_rule("/participants", view_func=ParticipantsView.as_view("participants"))
public_bp.add_url_rule("/csrf-token", view_func=CsrfTokenView.as_view("csrf_token"))
public_bp.add_url_rule("/join", view_func=JoinView.as_view("join"), methods=["POST"])
public_bp.add_url_rule("/check", view_func=CheckAssignmentView.as_view("check"), methods=["POST"])
