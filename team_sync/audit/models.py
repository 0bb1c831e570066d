from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


class AuditLog(models.Model):
    class Action(models.TextChoices):
        LOGIN = "login", _("Login")
        TEACHER_CREATED = "teacher_created", _("Teacher created")
        TEACHER_DELETED = "teacher_deleted", _("Teacher deleted")
        LAB_INSTRUCTOR_CREATED = "lab_instructor_created", _("Lab instructor created")
        LAB_INSTRUCTOR_RESET = "lab_instructor_reset", _("Lab instructor reset")
        CLASS_DELETED = "class_deleted", _("Class deleted")
        CLASS_TEACHER_CHANGED = "class_teacher_changed", _("Class teacher changed")
        PROJECT_STATUS_CHANGED = "project_status_changed", _("Project status changed")

    action = models.CharField(max_length=100, choices=Action.choices, db_index=True)
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="audit_logs",
    )
    message = models.TextField(blank=True)
    # Affected record, e.g. ("Classroom", 12).
    model_name = models.CharField(max_length=150, blank=True)
    record_id = models.BigIntegerField(null=True, blank=True)
    before = models.JSONField(null=True, blank=True)
    after = models.JSONField(null=True, blank=True)
    ip_address = models.CharField(max_length=64, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        target = f" {self.model_name}#{self.record_id}" if self.record_id else ""
        return f"{self.get_action_display()}{target} by {self.actor_id or 'system'}"
