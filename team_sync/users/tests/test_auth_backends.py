import pytest
from django.contrib.auth import authenticate

from team_sync.users.auth_backends import UsernameOrEmailBackend
from team_sync.users.models import User

pytestmark = pytest.mark.django_db

PASSWORD = "Lecture-Hall-42"  # noqa: S105


@pytest.fixture
def backend():
    return UsernameOrEmailBackend()


@pytest.fixture
def instructor():
    return User.objects.create_user(
        username="ta.rao",
        email="rao@college.edu",
        password=PASSWORD,
        role=User.Role.LAB_INSTRUCTOR,
    )


@pytest.fixture
def student():
    return User.objects.create_user(
        username="121CS0042",
        usn="121CS0042",
        password=PASSWORD,
    )


@pytest.mark.parametrize("identifier", ["ta.rao", "TA.RAO", "rao@college.edu", " Rao@College.edu "])
def test_instructor_identifiers(backend, instructor, identifier):
    assert backend.authenticate(None, username=identifier, password=PASSWORD) == instructor


def test_usn_is_case_insensitive(backend, student):
    assert backend.authenticate(None, username="121cs0042", password=PASSWORD) == student


def test_wrong_password(backend, instructor):
    assert backend.authenticate(None, username="ta.rao", password="nope") is None


def test_unknown_identifier(backend, instructor):
    assert backend.authenticate(None, username="ghost@college.edu", password=PASSWORD) is None


@pytest.mark.parametrize(
    ("username", "password"),
    [(None, PASSWORD), ("ta.rao", None)],
)
def test_missing_credentials(backend, instructor, username, password):
    assert backend.authenticate(None, username=username, password=password) is None


def test_inactive_user_rejected(backend, instructor):
    instructor.is_active = False
    instructor.save(update_fields=["is_active"])
    assert backend.authenticate(None, username="ta.rao", password=PASSWORD) is None


def test_peer_without_password_cannot_log_in(backend):
    peer = User.objects.create_user(username="121CS0043", usn="121CS0043")
    assert not peer.has_usable_password()
    assert backend.authenticate(None, username="121CS0043", password="") is None


def test_configured_in_settings(instructor):
    assert authenticate(None, username="rao@college.edu", password=PASSWORD) == instructor
