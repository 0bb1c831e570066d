from __future__ import annotations

from django.http import QueryDict
from rest_framework import serializers

from team_sync.classes.api.serializers import ClassroomSummarySerializer
from team_sync.classes.models import Classroom
from team_sync.projects.models import Project
from team_sync.users.api.serializers import UserSummarySerializer


def normalize_project_payload(data) -> dict:
    """Map the SPA's keys onto serializer fields.

    Supported aliases:
    - class: `class` | `classId` → `classroom_id`
    - size: `teamSize` → `team_size`
    """
    out = data.dict() if isinstance(data, QueryDict) else dict(data)
    for alias in ("class", "classId"):
        if alias in out and "classroom_id" not in out:
            out["classroom_id"] = out.pop(alias)
    if "teamSize" in out and "team_size" not in out:
        out["team_size"] = out.pop("teamSize")
    return out


class ProjectSerializer(serializers.ModelSerializer):
    created_by = UserSummarySerializer(read_only=True)
    classroom = ClassroomSummarySerializer(read_only=True)
    classroom_id = serializers.PrimaryKeyRelatedField(
        source="classroom",
        queryset=Classroom.objects.all(),
        write_only=True,
    )
    team_size = serializers.IntegerField(min_value=1)

    class Meta:
        model = Project
        fields = [
            "id",
            "title",
            "description",
            "created_by",
            "classroom",
            "classroom_id",
            "team_size",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_title(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Title is required")
        return value

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["class"] = data.pop("classroom")
        return data


class ProjectStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Project.Status.choices)
