import logging

from django.contrib.auth import get_user_model
from drf_spectacular.utils import OpenApiExample
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
from team_sync.classes.models import Classroom
from team_sync.classes.models import is_valid_usn
from team_sync.classes.models import normalize_usn

from .permissions import IsClassTeacher
from .permissions import IsClassTeacherOrLabInstructor
from .serializers import ClassroomSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


@extend_schema_view(
    list=extend_schema(tags=["Classes"]),
    retrieve=extend_schema(tags=["Classes"]),
    create=extend_schema(tags=["Classes"]),
    update=extend_schema(tags=["Classes"]),
    partial_update=extend_schema(tags=["Classes"]),
    destroy=extend_schema(tags=["Classes"]),
)
class ClassroomViewSet(viewsets.ModelViewSet):
    queryset = Classroom.objects.select_related("teacher")
    serializer_class = ClassroomSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["teacher", "semester"]
    pagination_class = None

    def get_permissions(self):
        action_name = getattr(self, "action", None)
        if action_name == "retrieve":
            return [AllowAny()]
        if action_name in {
            "update",
            "partial_update",
            "destroy",
            "add_student",
            "remove_student",
        }:
            return [IsAuthenticated(), IsClassTeacher()]
        if action_name == "change_teacher":
            return [IsAuthenticated(), IsClassTeacherOrLabInstructor()]
        return [perm() for perm in self.permission_classes]

    def perform_create(self, serializer):
        classroom = serializer.save(teacher=self.request.user)
        logger.info("Class %s created by user %s", classroom.pk, self.request.user.pk)

    def destroy(self, request, *args, **kwargs):
        classroom = self.get_object()
        snapshot = {"name": classroom.name, "semester": classroom.semester}
        pk = classroom.pk
        classroom.delete()
        log_action(
            AuditLog.Action.CLASS_DELETED,
            request=request,
            message=f"Class deleted: {snapshot['name']}",
            model_name="Classroom",
            record_id=pk,
            before=snapshot,
        )
        return Response({"message": "Class deleted successfully"})

    @extend_schema(
        tags=["Classes"],
        request={"application/json": {"type": "object"}},
        responses=ClassroomSerializer,
        examples=[
            OpenApiExample(
                name="Enroll",
                value={"studentId": "121CS0001"},
                request_only=True,
            ),
        ],
    )
    @action(detail=True, methods=["post"], url_path="students")
    def add_student(self, request, pk=None):
        classroom = self.get_object()
        usn = normalize_usn(request.data.get("studentId"))
        if not usn:
            return Response(
                {"error": "Student ID is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if not is_valid_usn(usn):
            return Response(
                {"error": "Invalid USN format"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if classroom.has_student(usn):
            return Response(
                {"error": "Student is already in this class"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        classroom.students = [*classroom.students, usn]
        classroom.save(update_fields=["students", "updated_at"])
        return Response(self.get_serializer(classroom).data)

    @extend_schema(tags=["Classes"], request=None, responses=ClassroomSerializer)
    @action(
        detail=True,
        methods=["delete"],
        url_path=r"students/(?P<usn>[^/]+)",
    )
    def remove_student(self, request, pk=None, usn=None):
        classroom = self.get_object()
        usn = normalize_usn(usn)
        if not classroom.has_student(usn):
            return Response(
                {"error": "Student not found in this class"},
                status=status.HTTP_404_NOT_FOUND,
            )
        classroom.students = [s for s in classroom.students if s != usn]
        classroom.save(update_fields=["students", "updated_at"])
        return Response(self.get_serializer(classroom).data)

    @extend_schema(
        tags=["Classes"],
        request={"application/json": {"type": "object"}},
        responses=ClassroomSerializer,
    )
    @action(detail=True, methods=["put"], url_path="teacher")
    def change_teacher(self, request, pk=None):
        teacher_id = request.data.get("teacherId")
        if not teacher_id:
            return Response(
                {"error": "Teacher ID is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        classroom = self.get_object()
        try:
            teacher = User.objects.filter(pk=int(teacher_id)).first()
        except (TypeError, ValueError):
            teacher = None
        if teacher is None:
            return Response(
                {"error": "Teacher not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        if teacher.role != User.Role.TEACHER:
            return Response(
                {"error": "User is not a teacher"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        previous = classroom.teacher_id
        classroom.teacher = teacher
        classroom.save(update_fields=["teacher", "updated_at"])
        log_action(
            AuditLog.Action.CLASS_TEACHER_CHANGED,
            request=request,
            model_name="Classroom",
            record_id=classroom.pk,
            before={"teacher": previous},
            after={"teacher": teacher.pk},
        )
        return Response(self.get_serializer(classroom).data)
