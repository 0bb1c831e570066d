from rest_framework import serializers

from team_sync.classes.models import Classroom
from team_sync.classes.models import is_valid_usn
from team_sync.classes.models import normalize_usn_list
from team_sync.users.api.serializers import UserSummarySerializer


def clean_usn_list(values) -> list[str]:
    """Normalize a list of USNs and reject any that peers could not log in with."""
    usns = normalize_usn_list(values)
    invalid = [usn for usn in usns if not is_valid_usn(usn)]
    if invalid:
        raise serializers.ValidationError(
            f"Invalid USN format: {', '.join(invalid)}",
        )
    return usns


class ClassroomSerializer(serializers.ModelSerializer):
    teacher = UserSummarySerializer(read_only=True)
    students = serializers.ListField(
        child=serializers.CharField(max_length=20),
        required=False,
    )

    class Meta:
        model = Classroom
        fields = [
            "id",
            "name",
            "semester",
            "students",
            "teacher",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_students(self, value):
        return clean_usn_list(value)


class ClassroomSummarySerializer(serializers.ModelSerializer):
    """Compact shape embedded in projects and teams."""

    class Meta:
        model = Classroom
        fields = ["id", "name", "semester"]
