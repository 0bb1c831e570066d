from django.db import models

from team_sync.classes.models import normalize_usn
from team_sync.classes.models import normalize_usn_list


class TeamQuerySet(models.QuerySet):
    def for_project(self, project_id):
        return self.filter(project_id=project_id)

    def with_member(self, usn, project_id=None):
        """Teams listing ``usn`` among their members.

        Membership lives in a JSON list, so it is matched in Python to stay
        portable across SQLite and Postgres.
        """
        usn = normalize_usn(usn)
        qs = self if project_id is None else self.for_project(project_id)
        ids = [
            pk
            for pk, members in qs.values_list("pk", "members")
            if usn in (members or [])
        ]
        return self.filter(pk__in=ids)


class Team(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    classroom = models.ForeignKey(
        "classes.Classroom",
        on_delete=models.CASCADE,
        related_name="teams",
    )
    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="teams",
    )
    members = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = TeamQuerySet.as_manager()

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["classroom", "name"],
                name="unique_team_name_per_class",
            ),
        ]

    def __str__(self) -> str:
        return self.name

    def save(self, *args, **kwargs):
        self.name = (self.name or "").strip()
        self.description = (self.description or "").strip()
        self.members = normalize_usn_list(self.members)
        super().save(*args, **kwargs)

    def has_member(self, usn: str) -> bool:
        return normalize_usn(usn) in (self.members or [])
