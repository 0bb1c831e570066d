from django.contrib import admin

from team_sync.evaluations.models import Evaluation
from team_sync.evaluations.models import EvaluationForm


@admin.register(EvaluationForm)
class EvaluationFormAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "project", "evaluation_time", "created_by"]
    search_fields = ["title"]


@admin.register(Evaluation)
class EvaluationAdmin(admin.ModelAdmin):
    list_display = ["id", "form", "project", "team", "submitted_by", "created_at"]
    list_filter = ["project"]
