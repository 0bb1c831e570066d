from __future__ import annotations

from django.http import QueryDict
from rest_framework import serializers

from team_sync.evaluations.models import DEFAULT_EVALUATION_TIME
from team_sync.evaluations.models import Evaluation
from team_sync.evaluations.models import EvaluationForm
from team_sync.projects.models import Project
from team_sync.users.api.serializers import UserSummarySerializer


def normalize_form_payload(data) -> dict:
    out = data.dict() if isinstance(data, QueryDict) else dict(data)
    if "evaluation_time" in out and "evaluationTime" not in out:
        out["evaluationTime"] = out.pop("evaluation_time")
    if "projectId" in out and "project" not in out:
        out["project"] = out.pop("projectId")
    return out


class FormFieldSerializer(serializers.Serializer):
    type = serializers.ChoiceField(choices=EvaluationForm.FieldType.choices)
    label = serializers.CharField(max_length=255)
    required = serializers.BooleanField(default=True)

    def validate_label(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Label is required")
        return value


class EvaluationFormSerializer(serializers.ModelSerializer):
    evaluationTime = serializers.IntegerField(  # noqa: N815
        source="evaluation_time",
        min_value=1,
        required=False,
        default=DEFAULT_EVALUATION_TIME,
    )
    project = serializers.PrimaryKeyRelatedField(queryset=Project.objects.all())
    created_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = EvaluationForm
        fields = [
            "id",
            "title",
            "description",
            "fields",
            "evaluationTime",
            "project",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def get_fields(self):
        # `fields` clashes with the serializer attribute of the same name. A
        # ListField keeps ModelSerializer from treating it as a nested write.
        fields = super().get_fields()
        fields["fields"] = serializers.ListField(child=FormFieldSerializer())
        return fields

    def validate_fields(self, value):
        labels = [field["label"] for field in value]
        duplicates = sorted({label for label in labels if labels.count(label) > 1})
        if duplicates:
            raise serializers.ValidationError(
                f"Field labels must be unique: {', '.join(duplicates)}",
            )
        return value


class EvaluationFormUpdateSerializer(EvaluationFormSerializer):
    """Updates keep the project and only take a positive evaluation time."""

    evaluationTime = serializers.IntegerField(  # noqa: N815
        source="evaluation_time",
        required=False,
        allow_null=True,
    )
    project = serializers.PrimaryKeyRelatedField(read_only=True)

    def validate(self, attrs):
        time_limit = attrs.pop("evaluation_time", None)
        if time_limit is not None and time_limit > 0:
            attrs["evaluation_time"] = time_limit
        return attrs


class EvaluationSerializer(serializers.ModelSerializer):
    form = EvaluationFormSerializer(read_only=True)
    submitted_by = UserSummarySerializer(read_only=True)

    class Meta:
        model = Evaluation
        fields = [
            "id",
            "form",
            "project",
            "team",
            "submitted_by",
            "responses",
            "created_at",
        ]
        read_only_fields = fields
