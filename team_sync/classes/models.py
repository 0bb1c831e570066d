import re

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from team_sync.users.models import USN_PATTERN

USN_RE = re.compile(USN_PATTERN)


def normalize_usn(value) -> str:
    return str(value or "").strip().upper()


def normalize_usn_list(values) -> list[str]:
    """Uppercase, trim and de-duplicate a list of USNs, keeping order."""
    seen: list[str] = []
    for value in values or []:
        usn = normalize_usn(value)
        if usn and usn not in seen:
            seen.append(usn)
    return seen


def is_valid_usn(usn: str) -> bool:
    """True when an already-normalized USN can be used to log in."""
    return bool(USN_RE.match(usn))


class Classroom(models.Model):
    """A class taught by one teacher, with a roster of student USNs."""

    name = models.CharField(max_length=200)
    semester = models.CharField(max_length=50)
    students = models.JSONField(default=list, blank=True)
    teacher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="classes",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = _("class")
        verbose_name_plural = _("classes")

    def __str__(self) -> str:
        return f"{self.name} ({self.semester})"

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.students = normalize_usn_list(self.students)
        super().save(*args, **kwargs)

    def has_student(self, usn: str) -> bool:
        return normalize_usn(usn) in (self.students or [])
