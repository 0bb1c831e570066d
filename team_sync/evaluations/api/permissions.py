from rest_framework.permissions import BasePermission


class IsFormCreator(BasePermission):
    message = "Not authorized to change this form"

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and obj.created_by_id == user.pk)


class IsSubmitter(BasePermission):
    message = "Not authorized to delete this evaluation"

    def has_object_permission(self, request, view, obj) -> bool:
        user = getattr(request, "user", None)
        return bool(user and user.is_authenticated and obj.submitted_by_id == user.pk)
