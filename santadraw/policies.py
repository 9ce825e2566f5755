from __future__ import annotations

import logging

from flask.views import MethodView

from .errors import InvalidAdminPin, ValidationError
from .forms import AdminPinForm, form_error_message
from .models import DrawState
from .security import verify_pin


logger = logging.getLogger(__name__)


def require_admin_pin(state: DrawState, admin_pin: str | None, action: str) -> None:
    """Raises InvalidAdminPin unless admin_pin is exactly the stored admin PIN."""
    if not verify_pin(admin_pin, state.admin_pin_hash):
        logger.warning("Rejected admin PIN for %s", action)
        raise InvalidAdminPin()


# --------- Class-based view Mixins ----------

class AdminPinRequiredMixin(MethodView):
    """
    Every admin request must carry an admin_pin field.

    The PIN is only checked for presence here; whether it matches is decided by the
    roster operation itself, under the writer lock, before it changes anything.
    """
    form_class = AdminPinForm

    def dispatch_request(self, *args, **kwargs):
        form = self.form_class()
        if not form.validate():
            raise ValidationError(form_error_message(form))
        self.form = form
        return super().dispatch_request(*args, **kwargs)
