import logging

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from team_sync.audit.models import AuditLog
from team_sync.audit.utils import log_action
from team_sync.projects.models import Project

from .permissions import IsProjectManager
from .serializers import ProjectSerializer
from .serializers import ProjectStatusSerializer
from .serializers import normalize_project_payload

logger = logging.getLogger(__name__)


def _log_status_change(request, project, before: str, after: str) -> None:
    log_action(
        AuditLog.Action.PROJECT_STATUS_CHANGED,
        request=request,
        message=f"Project status changed: {before}→{after}",
        model_name="Project",
        record_id=project.pk,
        before={"status": before},
        after={"status": after},
    )


@extend_schema_view(
    list=extend_schema(
        tags=["Projects"],
        parameters=[OpenApiParameter("class", int, description="Class id")],
    ),
    retrieve=extend_schema(tags=["Projects"]),
    create=extend_schema(tags=["Projects"]),
    update=extend_schema(tags=["Projects"]),
    partial_update=extend_schema(tags=["Projects"]),
    destroy=extend_schema(tags=["Projects"]),
)
class ProjectViewSet(viewsets.ModelViewSet):
    queryset = Project.objects.select_related("classroom", "created_by")
    serializer_class = ProjectSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["status"]
    pagination_class = None

    def get_queryset(self):
        qs = super().get_queryset()
        class_id = self.request.query_params.get("class")
        if class_id and getattr(self, "action", None) == "list":
            try:
                qs = qs.filter(classroom_id=int(class_id))
            except ValueError:
                qs = qs.none()
        return qs

    def get_permissions(self):
        action_name = getattr(self, "action", None)
        if action_name == "retrieve":
            return [AllowAny()]
        if action_name in {"update", "partial_update", "destroy", "set_status"}:
            return [IsAuthenticated(), IsProjectManager()]
        return [perm() for perm in self.permission_classes]

    def create(self, request, *args, **kwargs):
        data = normalize_project_payload(request.data)
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)
        project = serializer.save(created_by=request.user)
        logger.info("Project %s created in class %s", project.pk, project.classroom_id)
        headers = self.get_success_headers(serializer.data)
        return Response(serializer.data, status=status.HTTP_201_CREATED, headers=headers)

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop("partial", False)
        instance = self.get_object()
        previous_status = instance.status
        data = normalize_project_payload(request.data)
        serializer = self.get_serializer(instance, data=data, partial=partial)
        serializer.is_valid(raise_exception=True)
        project = serializer.save()
        if project.status != previous_status:
            _log_status_change(request, project, previous_status, project.status)
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"message": "Project deleted successfully"})

    @extend_schema(
        tags=["Projects"],
        request=ProjectStatusSerializer,
        responses=ProjectSerializer,
    )
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        project = self.get_object()
        serializer = ProjectStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Invalid status"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        previous_status = project.status
        project.status = serializer.validated_data["status"]
        project.save(update_fields=["status", "updated_at"])
        if project.status != previous_status:
            _log_status_change(request, project, previous_status, project.status)
        return Response(self.get_serializer(project).data)
