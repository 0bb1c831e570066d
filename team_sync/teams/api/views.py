import logging

from drf_spectacular.utils import OpenApiParameter
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import serializers
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from team_sync.classes.models import Classroom
from team_sync.classes.models import is_valid_usn
from team_sync.classes.models import normalize_usn
from team_sync.realtime.events.teams import publish_member_added
from team_sync.realtime.events.teams import publish_team_updated
from team_sync.realtime.socketio import BroadcastUnavailable
from team_sync.teams.models import Team
from team_sync.users.api.permissions import IsSessionController

from .filters import TeamFilter
from .permissions import IsTeamClassTeacher
from .serializers import TeamSerializer
from .serializers import normalize_team_payload
from .serializers import validate_membership

logger = logging.getLogger(__name__)

ALLOWED_UPDATES = {"name", "description"}


def _broadcast(publish, *args) -> None:
    """Team events are best-effort: the write already happened."""
    try:
        publish(*args)
    except BroadcastUnavailable:
        logger.warning("Broadcast disabled, skipped %s", publish.__name__)
    except Exception:
        logger.exception("Broadcast %s failed", publish.__name__)


@extend_schema_view(
    list=extend_schema(
        tags=["Teams"],
        parameters=[OpenApiParameter("class", int, description="Class id")],
    ),
    retrieve=extend_schema(tags=["Teams"]),
    create=extend_schema(tags=["Teams"]),
    partial_update=extend_schema(tags=["Teams"]),
    destroy=extend_schema(tags=["Teams"]),
)
class TeamViewSet(viewsets.ModelViewSet):
    queryset = Team.objects.select_related("classroom", "project")
    serializer_class = TeamSerializer
    permission_classes = [IsAuthenticated]
    filterset_class = TeamFilter
    pagination_class = None
    http_method_names = ["get", "post", "patch", "delete", "head", "options"]

    def get_permissions(self):
        action_name = getattr(self, "action", None)
        if action_name in {"partial_update", "add_member"}:
            return [IsAuthenticated(), IsTeamClassTeacher()]
        if action_name == "destroy":
            return [IsSessionController()]
        return [perm() for perm in self.permission_classes]

    def create(self, request, *args, **kwargs):
        data = normalize_team_payload(request.data)
        class_id = data.get("classroom_id")
        try:
            class_exists = Classroom.objects.filter(pk=int(class_id)).exists()
        except (TypeError, ValueError):
            class_exists = False
        if not class_exists:
            return Response(
                {"error": "Class not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)
        team = serializer.save()
        logger.info("Team %s created in class %s", team.pk, team.classroom_id)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, *args, **kwargs):
        if not set(request.data.keys()) <= ALLOWED_UPDATES:
            return Response(
                {"error": "Invalid updates"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        team = self.get_object()
        serializer = self.get_serializer(team, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        _broadcast(publish_team_updated, serializer.data)
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"message": "Team deleted successfully"})

    @extend_schema(
        tags=["Teams"],
        request=None,
        responses=TeamSerializer(many=True),
    )
    @action(detail=False, methods=["get"], url_path=r"class/(?P<class_id>[^/.]+)")
    def by_class(self, request, class_id=None):
        try:
            qs = self.get_queryset().filter(classroom_id=int(class_id))
        except ValueError:
            qs = Team.objects.none()
        return Response(self.get_serializer(qs, many=True).data)

    @extend_schema(
        tags=["Teams"],
        request={"application/json": {"type": "object"}},
        responses=TeamSerializer,
    )
    @action(detail=True, methods=["post"], url_path="members")
    def add_member(self, request, pk=None):
        team = self.get_object()
        usn = normalize_usn(request.data.get("memberId"))
        if not usn:
            return Response(
                {"error": "Member ID is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not is_valid_usn(usn):
            return Response(
                {"error": "Invalid USN format"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if team.has_member(usn):
            return Response(
                {"error": "Member already in team"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        members = [*team.members, usn]
        try:
            validate_membership(team.classroom, team.project, members)
        except serializers.ValidationError as exc:
            return Response(exc.detail, status=status.HTTP_400_BAD_REQUEST)
        team.members = members
        team.save(update_fields=["members", "updated_at"])
        _broadcast(publish_member_added, team.pk, usn)
        return Response(self.get_serializer(team).data)
