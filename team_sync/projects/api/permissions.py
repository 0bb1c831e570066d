from rest_framework.permissions import BasePermission


class IsProjectManager(BasePermission):
    message = "Not authorized to modify this project"

    def has_object_permission(self, request, view, obj) -> bool:
        return obj.is_managed_by(getattr(request, "user", None))
