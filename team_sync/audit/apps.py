import importlib

from django.apps import AppConfig


class AuditConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "team_sync.audit"

    def ready(self) -> None:  # pragma: no cover
        importlib.import_module("team_sync.audit.signals")
        return super().ready()
