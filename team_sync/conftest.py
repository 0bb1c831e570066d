import pytest
from rest_framework.test import APIClient

from team_sync.classes.models import Classroom
from team_sync.projects.models import Project
from team_sync.teams.models import Team
from team_sync.users.models import User

TEST_PASSWORD = "TestPass123!"  # noqa: S105 - test credentials only


def make_user(username: str, role: str = User.Role.PEER, **extra) -> User:
    return User.objects.create_user(
        username=username,
        email=extra.pop("email", f"{username}@example.com"),
        password=TEST_PASSWORD,
        name=extra.pop("name", username.title()),
        role=role,
        **extra,
    )


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user(db) -> User:
    return make_user("someone")


@pytest.fixture
def teacher(db) -> User:
    return make_user("teacher", role=User.Role.TEACHER)


@pytest.fixture
def other_teacher(db) -> User:
    return make_user("otherteacher", role=User.Role.TEACHER)


@pytest.fixture
def lab_instructor(db) -> User:
    return make_user("labinstructor", role=User.Role.LAB_INSTRUCTOR)


@pytest.fixture
def peer(db) -> User:
    return User.objects.create_user(
        username="121CS0001",
        usn="121CS0001",
        name="121CS0001",
        role=User.Role.PEER,
    )


@pytest.fixture
def classroom(teacher) -> Classroom:
    return Classroom.objects.create(
        name="Software Engineering",
        semester="5",
        students=["121CS0001", "121CS0002", "121CS0003", "121CS0004"],
        teacher=teacher,
    )


@pytest.fixture
def project(classroom, teacher) -> Project:
    return Project.objects.create(
        title="Mini Project",
        description="Build something small",
        classroom=classroom,
        created_by=teacher,
        team_size=3,
    )


@pytest.fixture
def team(classroom, project) -> Team:
    return Team.objects.create(
        name="Alpha",
        description="First team",
        classroom=classroom,
        project=project,
        members=["121CS0001", "121CS0002"],
    )
