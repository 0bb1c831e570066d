from django.contrib import admin

from team_sync.projects.models import Project


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ["id", "title", "classroom", "team_size", "status", "created_by"]
    list_filter = ["status"]
    search_fields = ["title", "description"]
