from django.contrib import admin

from team_sync.classes.models import Classroom


@admin.register(Classroom)
class ClassroomAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "semester", "teacher", "created_at"]
    search_fields = ["name", "semester", "teacher__email", "teacher__name"]
    list_filter = ["semester"]
