import pytest
from django.contrib.auth.models import AnonymousUser
from django.test import RequestFactory

from team_sync.audit.models import AuditLog
from team_sync.audit.utils import client_ip
from team_sync.audit.utils import log_action
from team_sync.users.api.auth_views import _login_response
from team_sync.users.models import User


@pytest.mark.django_db
def test_str_names_action_target_and_actor(teacher: User):
    log = AuditLog.objects.create(
        action=AuditLog.Action.CLASS_DELETED,
        actor=teacher,
        model_name="Classroom",
        record_id=4,
    )
    assert str(log) == f"Class deleted Classroom#4 by {teacher.pk}"


@pytest.mark.django_db
def test_log_action_ignores_non_user_actor():
    log_action(AuditLog.Action.LAB_INSTRUCTOR_RESET, actor="cron", message="nightly")
    row = AuditLog.objects.get(action="lab_instructor_reset")
    assert row.actor is None
    assert row.ip_address == ""
    assert str(row).endswith("by system")


@pytest.mark.django_db
def test_log_action_takes_actor_and_address_from_request(teacher: User):
    request = RequestFactory().delete("/api/v1/classes/1/", REMOTE_ADDR="10.0.0.9")
    request.user = teacher
    row = log_action(AuditLog.Action.CLASS_DELETED, request=request, record_id=1)
    assert row.actor == teacher
    assert row.ip_address == "10.0.0.9"


@pytest.mark.django_db
def test_anonymous_request_has_no_actor():
    request = RequestFactory().post("/")
    request.user = AnonymousUser()
    row = log_action(AuditLog.Action.LOGIN, request=request)
    assert row.actor is None


def test_client_ip_prefers_first_forwarded_hop():
    request = RequestFactory().get(
        "/",
        REMOTE_ADDR="10.0.0.1",
        HTTP_X_FORWARDED_FOR="203.0.113.5, 10.0.0.1",
    )
    assert client_ip(request) == "203.0.113.5"
    assert client_ip(None) == ""


@pytest.mark.django_db
def test_login_records_audit_entry(teacher: User):
    request = RequestFactory().post("/api/v1/auth/login/", REMOTE_ADDR="10.0.0.7")
    _login_response(request, teacher)
    row = AuditLog.objects.get(action=AuditLog.Action.LOGIN)
    assert row.actor == teacher
    assert row.ip_address == "10.0.0.7"
    assert "role=teacher" in row.message
    assert "ip=10.0.0.7" in row.message
