"""Role matrix over the endpoints that gate on role or ownership."""

from rest_framework import status

from tests.permissions.mixins import ROLE_ADMIN
from tests.permissions.mixins import ROLE_LAB_INSTRUCTOR
from tests.permissions.mixins import ROLE_OTHER_TEACHER
from tests.permissions.mixins import ROLE_PEER
from tests.permissions.mixins import ROLE_TEACHER
from tests.permissions.mixins import RoleAPITestCase


class PermissionMatrixAPITests(RoleAPITestCase):
    def test_anonymous_is_rejected_from_protected_collections(self):
        for name in (
            "api_v1:classes-list",
            "api_v1:projects-list",
            "api_v1:teams-list",
            "api_v1:user-list",
        ):
            res = self.get(name, role=None)
            self.assert_http_status(res, status.HTTP_401_UNAUTHORIZED)

    def test_public_detail_endpoints(self):
        res = self.get(
            "api_v1:classes-detail",
            role=None,
            reverse_kwargs={"pk": self.classroom.pk},
        )
        self.assert_http_status(res, status.HTTP_200_OK)
        res = self.get(
            "api_v1:projects-detail",
            role=None,
            reverse_kwargs={"pk": self.project.pk},
        )
        self.assert_http_status(res, status.HTTP_200_OK)

    def test_class_changes_are_owner_only(self):
        for role in (ROLE_OTHER_TEACHER, ROLE_LAB_INSTRUCTOR, ROLE_PEER):
            res = self.patch(
                "api_v1:classes-detail",
                role=role,
                payload={"name": "Renamed"},
                reverse_kwargs={"pk": self.classroom.pk},
            )
            self.assert_denied(res)
        res = self.patch(
            "api_v1:classes-detail",
            role=ROLE_TEACHER,
            payload={"name": "Renamed"},
            reverse_kwargs={"pk": self.classroom.pk},
        )
        self.assert_allowed(res)

    def test_class_teacher_reassignment(self):
        payload = {"teacherId": self.roles[ROLE_OTHER_TEACHER].user.pk}
        denied = self.put(
            "api_v1:classes-change-teacher",
            role=ROLE_PEER,
            payload=payload,
            reverse_kwargs={"pk": self.classroom.pk},
        )
        self.assert_denied(denied)
        allowed = self.put(
            "api_v1:classes-change-teacher",
            role=ROLE_LAB_INSTRUCTOR,
            payload=payload,
            reverse_kwargs={"pk": self.classroom.pk},
        )
        self.assert_allowed(allowed)

    def test_teacher_management_is_lab_instructor_only(self):
        for role in (ROLE_TEACHER, ROLE_PEER):
            res = self.get("auth_v1:teachers", role=role)
            self.assert_denied(res)
        for role in (ROLE_LAB_INSTRUCTOR, ROLE_ADMIN):
            res = self.get("auth_v1:teachers", role=role)
            self.assert_allowed(res)

    def test_project_changes_need_creator_or_class_teacher(self):
        res = self.patch(
            "api_v1:projects-detail",
            role=ROLE_OTHER_TEACHER,
            payload={"title": "Nope"},
            reverse_kwargs={"pk": self.project.pk},
        )
        self.assert_denied(res)
        res = self.patch(
            "api_v1:projects-detail",
            role=ROLE_TEACHER,
            payload={"title": "Yes"},
            reverse_kwargs={"pk": self.project.pk},
        )
        self.assert_allowed(res)

    def test_team_update_is_class_teacher_only(self):
        res = self.patch(
            "api_v1:teams-detail",
            role=ROLE_OTHER_TEACHER,
            payload={"name": "Beta"},
            reverse_kwargs={"pk": self.team.pk},
        )
        self.assert_denied(res)

    def test_team_delete_is_closed_to_peers(self):
        res = self.delete(
            "api_v1:teams-detail",
            role=ROLE_PEER,
            reverse_kwargs={"pk": self.team.pk},
        )
        self.assert_denied(res)
        res = self.delete(
            "api_v1:teams-detail",
            role=ROLE_TEACHER,
            reverse_kwargs={"pk": self.team.pk},
        )
        self.assert_allowed(res)

    def test_presentation_relay_closed_to_peers(self):
        res = self.post(
            "api_v1:presentation-current-team",
            role=ROLE_PEER,
            payload={"team": {"id": self.team.pk}},
            reverse_kwargs={"project_id": self.project.pk},
        )
        self.assert_denied(res)
        res = self.post(
            "api_v1:presentation-current-team",
            role=None,
            payload={"team": {"id": self.team.pk}},
            reverse_kwargs={"project_id": self.project.pk},
        )
        self.assert_denied(res, status.HTTP_401_UNAUTHORIZED)
