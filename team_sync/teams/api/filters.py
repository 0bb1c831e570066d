import django_filters

from team_sync.teams.models import Team


class TeamFilter(django_filters.FilterSet):
    project = django_filters.NumberFilter(field_name="project_id")
    member = django_filters.CharFilter(method="filter_member")

    class Meta:
        model = Team
        fields = ["project", "member"]

    def filter_member(self, queryset, name, value):
        return queryset.with_member(value)


# `class` is a keyword, so the classroom filter is attached under that name here.
TeamFilter.base_filters["class"] = django_filters.NumberFilter(
    field_name="classroom_id",
)
