from rest_framework.permissions import BasePermission

from team_sync.users.api.permissions import ROLE_ADMIN
from team_sync.users.api.permissions import ROLE_LAB_INSTRUCTOR
from team_sync.users.api.permissions import _is_staff_or_role


class IsClassTeacher(BasePermission):
    """Only the teacher who owns the class may change it."""

    message = "Not authorized to modify this class"

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        return obj.teacher_id == user.pk


class IsClassTeacherOrLabInstructor(IsClassTeacher):
    def has_object_permission(self, request, view, obj) -> bool:
        if _is_staff_or_role(request.user, [ROLE_LAB_INSTRUCTOR, ROLE_ADMIN]):
            return True
        return super().has_object_permission(request, view, obj)
