from django.conf import settings
from django.db import models

DEFAULT_EVALUATION_TIME = 300


class EvaluationFormQuerySet(models.QuerySet):
    def latest_for_project(self, project_id):
        return self.filter(project_id=project_id).order_by("-created_at", "-id").first()


class EvaluationForm(models.Model):
    """Peer evaluation form attached to a project.

    ``fields`` is a list of ``{"type": "rating"|"text", "label": str,
    "required": bool}``. The newest form of a project is the active one.
    """

    class FieldType(models.TextChoices):
        RATING = "rating", "Rating"
        TEXT = "text", "Text"

    title = models.CharField(max_length=255)
    description = models.TextField()
    fields = models.JSONField(default=list)
    evaluation_time = models.PositiveIntegerField(default=DEFAULT_EVALUATION_TIME)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="evaluation_forms",
    )
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="evaluation_forms",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = EvaluationFormQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return self.title


class Evaluation(models.Model):
    form = models.ForeignKey(
        EvaluationForm,
        on_delete=models.CASCADE,
        related_name="evaluations",
    )
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.CASCADE,
        related_name="evaluations",
    )
    team = models.ForeignKey(
        "teams.Team",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="evaluations",
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="evaluations",
    )
    responses = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"Evaluation {self.pk} of form {self.form_id}"
