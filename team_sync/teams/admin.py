from django.contrib import admin

from team_sync.teams.models import Team


@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "classroom", "project", "created_at"]
    search_fields = ["name", "description"]
    list_filter = ["classroom"]
