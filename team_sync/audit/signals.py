from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from .models import AuditLog
from .utils import client_ip
from .utils import log_action


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    ua = request.META.get("HTTP_USER_AGENT", "-") if request else "-"
    log_action(
        AuditLog.Action.LOGIN,
        request=request,
        actor=user,
        message=f"role={user.role} ip={client_ip(request) or '-'} ua={ua}",
        model_name="User",
        record_id=user.pk,
    )
