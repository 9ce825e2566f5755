from __future__ import annotations

from flask import Blueprint

from ..forms import ChangeAdminPinForm
from ..policies import AdminPinRequiredMixin
from ..services import roster
from . import ok


admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


class AdminDrawView(AdminPinRequiredMixin):
    def post(self):
        roster.perform_draw(self.form.admin_pin.data)
        return ok(state=roster.get_status())


class AdminResetView(AdminPinRequiredMixin):
    def post(self):
        roster.reset_draw(self.form.admin_pin.data)
        return ok(state=roster.get_status())


class AdminWipeView(AdminPinRequiredMixin):
    def post(self):
        removed = roster.wipe_all(self.form.admin_pin.data)
        return ok(removed=removed, state=roster.get_status())


class AdminDeleteParticipantView(AdminPinRequiredMixin):
    def post(self, participant_id: int):
        roster.remove_participant(participant_id, self.form.admin_pin.data)
        return ok(participants=roster.list_participants())


class AdminChangePinView(AdminPinRequiredMixin):
    form_class = ChangeAdminPinForm

    def post(self):
        roster.update_admin_pin(self.form.admin_pin.data, self.form.new_pin.data)
        return ok()


# Register routes
admin_bp.add_url_rule("/draw", view_func=AdminDrawView.as_view("draw"), methods=["POST"])
admin_bp.add_url_rule("/reset", view_func=AdminResetView.as_view("reset"), methods=["POST"])
admin_bp.add_url_rule("/wipe", view_func=AdminWipeView.as_view("wipe"), methods=["POST"])
admin_bp.add_url_rule("/pin", view_func=AdminChangePinView.as_view("change_pin"), methods=["POST"])
admin_bp.add_url_rule(
    "/participants/<int:participant_id>/delete",
    view_func=AdminDeleteParticipantView.as_view("delete_participant"),
    methods=["POST"],
)
