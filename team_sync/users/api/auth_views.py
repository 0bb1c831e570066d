"""Login, registration and teacher-account endpoints.

Every credential-bearing response has the shape
``{"token": <access>, "refresh": <refresh>, "user": {...}}`` so the SPA can
store ``token`` and send it back as ``Authorization: Bearer <token>``.
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from django.contrib.auth.signals import user_logged_in
from django.db import IntegrityError
from django.db import transaction
from django.db.models import ProtectedError
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from team_sync.audit.models import AuditLog
from team_sync.audit.utils import log_action
from team_sync.teams.models import Team
from team_sync.users.models import User

from .permissions import IsLabInstructor
from .serializers import CredentialsSerializer
from .serializers import PeerLoginSerializer
from .serializers import RegisterSerializer
from .serializers import TeacherCreateSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)


def issue_tokens(user: User) -> dict[str, str]:
    refresh = RefreshToken.for_user(user)
    refresh["role"] = user.role
    return {"token": str(refresh.access_token), "refresh": str(refresh)}


def _login_response(request, user: User, status_code: int = status.HTTP_200_OK):
    user_logged_in.send(sender=user.__class__, request=request, user=user)
    payload = issue_tokens(user)
    payload["user"] = UserSerializer(user, context={"request": request}).data
    return Response(payload, status=status_code)


def _invalid_credentials() -> Response:
    return Response(
        {"error": "Invalid credentials"},
        status=status.HTTP_401_UNAUTHORIZED,
    )


@extend_schema(tags=["Authentication"], request=RegisterSerializer)
class RegisterView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]
        if User.objects.filter(email__iexact=email).exists():
            return Response(
                {"error": "User already exists"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user = serializer.save()
        logger.info("Registered %s user %s", user.role, user.pk)
        return _login_response(request, user, status.HTTP_201_CREATED)


@extend_schema(tags=["Authentication"], request=CredentialsSerializer)
class LoginView(APIView):
    """Email (or username) + password login for any role."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = CredentialsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Email and password are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        user = authenticate(
            request,
            username=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            return _invalid_credentials()
        return _login_response(request, user)


@extend_schema(tags=["Authentication"], request=CredentialsSerializer)
class TeacherLoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = CredentialsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {"error": "Email and password are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        email = serializer.validated_data["email"].strip().lower()
        user = User.objects.filter(email=email, role=User.Role.TEACHER).first()
        if user is None or not user.check_password(
            serializer.validated_data["password"],
        ):
            return _invalid_credentials()
        if not user.is_active:
            return _invalid_credentials()
        return _login_response(request, user)


@extend_schema(tags=["Authentication"], request=PeerLoginSerializer)
class PeerLoginView(APIView):
    """USN-only login for students listed on a team of the given project."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        if not request.data.get("usn") or not (
            request.data.get("projectId") or request.data.get("project_id")
        ):
            return Response(
                {"error": "USN and Project ID are required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        serializer = PeerLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        usn = serializer.validated_data["usn"]
        project_id = serializer.validated_data["project_id"]

        if not Team.objects.with_member(usn, project_id=project_id).exists():
            return Response(
                {"error": "USN not found in any team for this project"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        try:
            with transaction.atomic():
                user, created = User.objects.get_or_create(
                    usn=usn,
                    defaults={
                        "username": usn,
                        "name": usn,
                        "role": User.Role.PEER,
                    },
                )
                if created:
                    user.set_unusable_password()
                    user.save(update_fields=["password"])
        except IntegrityError:
            # Another request created the same peer concurrently.
            user = User.objects.get(usn=usn)
        if user.role != User.Role.PEER:
            return _invalid_credentials()
        return _login_response(request, user)


@extend_schema(tags=["Teachers"], request=TeacherCreateSerializer)
class TeacherCreateView(APIView):
    permission_classes = [IsLabInstructor]

    def post(self, request):
        serializer = TeacherCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        email = serializer.validated_data["email"]
        if User.objects.filter(email__iexact=email).exists():
            return Response(
                {"error": "User already exists"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        teacher = serializer.save()
        log_action(
            AuditLog.Action.TEACHER_CREATED,
            request=request,
            message=f"email={teacher.email}",
            model_name="User",
            record_id=teacher.pk,
        )
        return Response(
            {"user": UserSerializer(teacher, context={"request": request}).data},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Teachers"], responses=UserSerializer(many=True))
class TeacherListView(APIView):
    permission_classes = [IsLabInstructor]

    def get(self, request):
        teachers = User.objects.filter(role=User.Role.TEACHER).order_by("name")
        data = UserSerializer(teachers, many=True, context={"request": request}).data
        return Response(data)


@extend_schema(tags=["Teachers"], responses=UserSerializer(many=True))
class PublicTeacherListView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        teachers = User.objects.filter(
            role=User.Role.TEACHER,
            is_active=True,
        ).order_by("name")
        data = UserSerializer(teachers, many=True, context={"request": request}).data
        return Response(data)


@extend_schema(tags=["Teachers"], request=None)
class TeacherDeleteView(APIView):
    permission_classes = [IsAuthenticated, IsLabInstructor]

    def delete(self, request, pk: int):
        user = User.objects.filter(pk=pk).first()
        if user is None:
            return Response(
                {"error": "Teacher not found"},
                status=status.HTTP_404_NOT_FOUND,
            )
        if user.role != User.Role.TEACHER:
            return Response(
                {"error": "User is not a teacher"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        email = user.email
        try:
            user.delete()
        except ProtectedError:
            return Response(
                {"error": "Teacher still owns classes; reassign them first"},
                status=status.HTTP_409_CONFLICT,
            )
        log_action(
            AuditLog.Action.TEACHER_DELETED,
            request=request,
            message=f"email={email}",
            model_name="User",
            record_id=pk,
        )
        return Response({"message": "Teacher deleted successfully"})
