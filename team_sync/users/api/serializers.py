from django.contrib.auth.password_validation import validate_password
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from team_sync.users.models import USN_PATTERN
from team_sync.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    id = serializers.IntegerField(read_only=True)
    email = serializers.EmailField(read_only=True, allow_null=True)
    role = serializers.CharField(read_only=True)
    usn = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "name",
            "role",
            "usn",
            "created_at",
        ]
        read_only_fields = ["username", "created_at"]


class UserSummarySerializer(serializers.ModelSerializer[User]):
    """Compact shape embedded in classes and projects."""

    class Meta:
        model = User
        fields = ["id", "name", "email"]


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField(required=False, allow_blank=True, default="")
    role = serializers.ChoiceField(
        choices=[User.Role.TEACHER, User.Role.PEER],
        required=False,
        default=User.Role.PEER,
    )

    def validate_email(self, value: str) -> str:
        return value.strip().lower()

    def create(self, validated_data):
        email = validated_data["email"]
        return User.objects.create_user(
            username=email,
            email=email,
            password=validated_data["password"],
            name=validated_data.get("name", ""),
            role=validated_data.get("role", User.Role.PEER),
        )


class TeacherCreateSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    name = serializers.CharField()

    def validate_email(self, value: str) -> str:
        return value.strip().lower()

    def validate(self, attrs):
        validate_password(attrs["password"])
        return attrs

    def create(self, validated_data):
        email = validated_data["email"]
        return User.objects.create_user(
            username=email,
            email=email,
            password=validated_data["password"],
            name=validated_data["name"],
            role=User.Role.TEACHER,
        )


class CredentialsSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField(write_only=True)


class PeerLoginSerializer(serializers.Serializer):
    usn = serializers.RegexField(
        USN_PATTERN,
        error_messages={"invalid": _("Invalid USN format")},
    )
    project_id = serializers.IntegerField()

    def to_internal_value(self, data):
        # The SPA posts camelCase keys.
        if hasattr(data, "dict"):
            data = data.dict()
        data = dict(data)
        if "projectId" in data and "project_id" not in data:
            data["project_id"] = data.pop("projectId")
        if isinstance(data.get("usn"), str):
            data["usn"] = data["usn"].strip().upper()
        return super().to_internal_value(data)
