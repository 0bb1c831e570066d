"""Role permission classes shared by every team_sync API."""

from collections.abc import Iterable

from rest_framework.permissions import BasePermission

from team_sync.users.models import User

ROLE_ADMIN = User.Role.ADMIN
ROLE_LAB_INSTRUCTOR = User.Role.LAB_INSTRUCTOR
ROLE_TEACHER = User.Role.TEACHER
ROLE_PEER = User.Role.PEER


def _user_has_role(user, roles: Iterable[str]) -> bool:
    if not (user and getattr(user, "is_authenticated", False)):
        return False
    return getattr(user, "role", None) in set(roles)


def _is_staff_or_role(user, roles: Iterable[str]) -> bool:
    return bool(getattr(user, "is_staff", False)) or _user_has_role(user, roles)


class _RolePermission(BasePermission):
    """Base helper to gate access by role names."""

    allowed_roles: tuple[str, ...] = ()
    allow_staff: bool = True

    def has_permission(self, request, view) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        if self.allow_staff and getattr(user, "is_staff", False):
            return True
        return _user_has_role(user, self.allowed_roles)


class IsLabInstructor(_RolePermission):
    """Lab instructors (and admins) manage teacher accounts."""

    allowed_roles = (ROLE_LAB_INSTRUCTOR, ROLE_ADMIN)


class IsSessionController(_RolePermission):
    """Anyone but a peer may drive a live presentation session."""

    allowed_roles = (ROLE_TEACHER, ROLE_LAB_INSTRUCTOR, ROLE_ADMIN)
