from __future__ import annotations

from django.http import QueryDict
from rest_framework import serializers

from team_sync.classes.api.serializers import ClassroomSummarySerializer
from team_sync.classes.api.serializers import clean_usn_list
from team_sync.classes.models import Classroom
from team_sync.projects.models import Project
from team_sync.teams.models import Team


def normalize_team_payload(data) -> dict:
    """Accept `classId`/`projectId` from the SPA as well as snake_case."""
    out = data.dict() if isinstance(data, QueryDict) else dict(data)
    if "classId" in out and "classroom_id" not in out:
        out["classroom_id"] = out.pop("classId")
    if "projectId" in out and "project_id" not in out:
        out["project_id"] = out.pop("projectId")
    return out


def validate_membership(classroom, project, members: list[str]) -> None:
    """Raise when members are off the class roster or exceed the team size."""
    roster = classroom.students or []
    if roster:
        unknown = [usn for usn in members if usn not in roster]
        if unknown:
            raise serializers.ValidationError(
                {"members": [f"Not enrolled in this class: {', '.join(unknown)}"]},
            )
    if project is not None and len(members) > project.team_size:
        raise serializers.ValidationError(
            {"members": [f"A team may have at most {project.team_size} members"]},
        )


class TeamSerializer(serializers.ModelSerializer):
    classroom = ClassroomSummarySerializer(read_only=True)
    classroom_id = serializers.PrimaryKeyRelatedField(
        source="classroom",
        queryset=Classroom.objects.all(),
        write_only=True,
    )
    project_id = serializers.PrimaryKeyRelatedField(
        source="project",
        queryset=Project.objects.all(),
        allow_null=True,
        required=False,
    )
    members = serializers.ListField(
        child=serializers.CharField(max_length=20),
        required=False,
    )

    class Meta:
        model = Team
        fields = [
            "id",
            "name",
            "description",
            "classroom",
            "classroom_id",
            "project_id",
            "members",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]
        # Name uniqueness is checked in validate() with a friendlier message.
        validators = []

    def validate_name(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Name is required")
        return value

    def validate_members(self, value):
        return clean_usn_list(value)

    def validate(self, attrs):
        instance = self.instance
        classroom = attrs.get("classroom") or getattr(instance, "classroom", None)
        project = attrs.get("project", getattr(instance, "project", None))
        name = attrs.get("name", getattr(instance, "name", ""))
        members = attrs.get("members", getattr(instance, "members", []) or [])

        if project is not None and project.classroom_id != classroom.pk:
            raise serializers.ValidationError(
                {"project_id": ["Project does not belong to this class"]},
            )
        clash = Team.objects.filter(classroom=classroom, name__iexact=name)
        if instance is not None:
            clash = clash.exclude(pk=instance.pk)
        if clash.exists():
            raise serializers.ValidationError(
                {"name": ["A team with this name already exists in this class"]},
            )
        validate_membership(classroom, project, members)
        return attrs

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data["class"] = data.pop("classroom")
        data["project"] = data.pop("project_id")
        return data
