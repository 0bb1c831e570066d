import logging

from drf_spectacular.utils import OpenApiExample
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from team_sync.evaluations.models import DEFAULT_EVALUATION_TIME
from team_sync.evaluations.models import Evaluation
from team_sync.evaluations.models import EvaluationForm
from team_sync.evaluations.services import ResponseError
from team_sync.evaluations.services import clean_responses
from team_sync.realtime.events.presentations import publish_evaluation_submitted
from team_sync.realtime.socketio import BroadcastUnavailable
from team_sync.teams.models import Team
from team_sync.users.api.permissions import ROLE_PEER
from team_sync.users.api.permissions import IsSessionController
from team_sync.users.api.permissions import _user_has_role

from .permissions import IsFormCreator
from .permissions import IsSubmitter
from .serializers import EvaluationFormSerializer
from .serializers import EvaluationFormUpdateSerializer
from .serializers import EvaluationSerializer
from .serializers import normalize_form_payload

logger = logging.getLogger(__name__)

PROJECT_PATH = r"project/(?P<project_id>\d+)"


def _missing_fields() -> Response:
    return Response(
        {"error": "Missing required fields"},
        status=status.HTTP_400_BAD_REQUEST,
    )


def _find_team(team_id, classroom_id=None):
    try:
        qs = Team.objects.filter(pk=int(team_id))
    except (TypeError, ValueError):
        return None
    if classroom_id is not None:
        qs = qs.filter(classroom_id=classroom_id)
    return qs.first()


def _store_evaluation(request, form, project_id, responses, team=None):
    """Validate answers against ``form`` and persist them.

    Returns ``(evaluation, None)`` or ``(None, error_response)``.
    """
    if not isinstance(responses, dict):
        return None, Response(
            {"error": "Responses must be an object keyed by field label"},
            status=status.HTTP_400_BAD_REQUEST,
        )
    try:
        cleaned = clean_responses(form, responses)
    except ResponseError as exc:
        return None, Response(exc.as_payload(), status=status.HTTP_400_BAD_REQUEST)
    evaluation = Evaluation.objects.create(
        form=form,
        project_id=project_id,
        team=team,
        submitted_by=request.user,
        responses=cleaned,
    )
    logger.info(
        "Evaluation %s submitted for project %s by user %s",
        evaluation.pk,
        project_id,
        request.user.pk,
    )
    return evaluation, None


@extend_schema_view(
    create=extend_schema(tags=["Evaluation Forms"]),
    retrieve=extend_schema(tags=["Evaluation Forms"]),
    update=extend_schema(tags=["Evaluation Forms"]),
    destroy=extend_schema(tags=["Evaluation Forms"]),
)
class EvaluationFormViewSet(
    mixins.CreateModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    queryset = EvaluationForm.objects.select_related("project", "created_by")
    serializer_class = EvaluationFormSerializer
    permission_classes = [IsAuthenticated]
    http_method_names = ["get", "post", "put", "delete", "head", "options"]

    def get_permissions(self):
        action_name = getattr(self, "action", None)
        if action_name == "create":
            return [IsSessionController()]
        if action_name in {"update", "destroy"}:
            return [IsAuthenticated(), IsFormCreator()]
        return [perm() for perm in self.permission_classes]

    def get_serializer_class(self):
        if getattr(self, "action", None) == "update":
            return EvaluationFormUpdateSerializer
        return EvaluationFormSerializer

    def create(self, request, *args, **kwargs):
        data = normalize_form_payload(request.data)
        required = ("title", "description", "project")
        if not all(data.get(key) for key in required) or data.get("fields") is None:
            return _missing_fields()
        if not data.get("evaluationTime"):
            data["evaluationTime"] = DEFAULT_EVALUATION_TIME
        serializer = self.get_serializer(data=data)
        serializer.is_valid(raise_exception=True)
        serializer.save(created_by=request.user)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        data = normalize_form_payload(request.data)
        if not (data.get("title") and data.get("description")) or data.get("fields") is None:
            return _missing_fields()
        form = self.get_object()
        serializer = self.get_serializer(form, data=data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"message": "Evaluation form deleted successfully"})

    @extend_schema(tags=["Evaluation Forms"], responses=EvaluationFormSerializer)
    @action(detail=False, methods=["get"], url_path=PROJECT_PATH)
    def for_project(self, request, project_id=None):
        form = EvaluationForm.objects.latest_for_project(project_id)
        if form is None:
            return Response(
                {
                    "id": None,
                    "title": "",
                    "description": "",
                    "fields": [],
                    "evaluationTime": DEFAULT_EVALUATION_TIME,
                    "project": int(project_id),
                },
            )
        return Response(EvaluationFormSerializer(form).data)

    @extend_schema(
        tags=["Evaluation Forms"],
        request={"application/json": {"type": "object"}},
        responses={201: EvaluationSerializer},
        examples=[
            OpenApiExample(
                name="Submit",
                value={"teamId": 3, "responses": {"Clarity": 4, "Comments": "Good"}},
                request_only=True,
            ),
        ],
    )
    @action(detail=False, methods=["post"], url_path=f"{PROJECT_PATH}/submit")
    def submit(self, request, project_id=None):
        responses = request.data.get("responses")
        team_id = request.data.get("teamId")
        if not responses or not team_id:
            return Response(
                {"error": "Responses and team ID are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        form = EvaluationForm.objects.latest_for_project(project_id)
        if form is None:
            return Response(
                {"error": "Evaluation form not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        project = form.project
        team = _find_team(team_id)
        if team is None:
            return Response(
                {"error": "Team not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        if team.classroom_id != project.classroom_id:
            return Response(
                {"error": "Team does not belong to this project"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        evaluation, error = _store_evaluation(
            request, form, project.pk, responses, team=team,
        )
        if error is not None:
            return error

        payload = {
            "evaluationId": evaluation.pk,
            "formId": form.pk,
            "teamId": team.pk,
            "submittedBy": request.user.pk,
        }
        try:
            publish_evaluation_submitted(project.pk, payload)
        except BroadcastUnavailable:
            logger.warning("Broadcast disabled, evaluation %s not announced", evaluation.pk)
        except Exception:
            logger.exception("Failed to announce evaluation %s", evaluation.pk)
        return Response(
            EvaluationSerializer(evaluation).data,
            status=status.HTTP_201_CREATED,
        )


@extend_schema_view(
    retrieve=extend_schema(tags=["Evaluations"]),
    destroy=extend_schema(tags=["Evaluations"]),
)
class EvaluationViewSet(
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = EvaluationSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = Evaluation.objects.select_related("form", "submitted_by")
        user = self.request.user
        # Peers only read their own submissions; deletion is checked per object.
        reading = getattr(self, "action", None) != "destroy"
        if reading and _user_has_role(user, [ROLE_PEER]):
            return qs.filter(submitted_by=user)
        return qs

    def get_permissions(self):
        if getattr(self, "action", None) == "destroy":
            return [IsAuthenticated(), IsSubmitter()]
        return [perm() for perm in self.permission_classes]

    def destroy(self, request, *args, **kwargs):
        self.get_object().delete()
        return Response({"message": "Evaluation deleted successfully"})

    @extend_schema(tags=["Evaluations"], responses=EvaluationSerializer(many=True))
    @action(detail=False, methods=["get"], url_path=PROJECT_PATH)
    def for_project(self, request, project_id=None):
        qs = self.get_queryset().filter(project_id=project_id)
        return Response(self.get_serializer(qs, many=True).data)

    @extend_schema(
        tags=["Evaluations"],
        request={"application/json": {"type": "object"}},
        responses={201: EvaluationSerializer},
    )
    @action(detail=False, methods=["post"], url_path=f"{PROJECT_PATH}/submit")
    def submit(self, request, project_id=None):
        form_id = request.data.get("formId")
        responses = request.data.get("responses")
        if not form_id or not responses:
            return Response(
                {"error": "Form ID and responses are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        try:
            form = EvaluationForm.objects.filter(
                pk=int(form_id),
                project_id=project_id,
            ).first()
        except (TypeError, ValueError):
            form = None
        if form is None:
            return Response(
                {"error": "Form not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        team = None
        if request.data.get("teamId"):
            team = _find_team(request.data["teamId"], form.project.classroom_id)
        evaluation, error = _store_evaluation(
            request, form, form.project_id, responses, team=team,
        )
        if error is not None:
            return error
        return Response(
            self.get_serializer(evaluation).data,
            status=status.HTTP_201_CREATED,
        )
