from rest_framework.permissions import BasePermission


class IsTeamClassTeacher(BasePermission):
    message = "Not authorized"

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        if not (user and getattr(user, "is_authenticated", False)):
            return False
        return obj.classroom.teacher_id == user.pk
