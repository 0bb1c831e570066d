from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from team_sync.classes.api.views import ClassroomViewSet
from team_sync.evaluations.api.views import EvaluationFormViewSet
from team_sync.evaluations.api.views import EvaluationViewSet
from team_sync.projects.api.views import ProjectViewSet
from team_sync.teams.api.views import TeamViewSet
from team_sync.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("classes", ClassroomViewSet, basename="classes")
router.register("projects", ProjectViewSet, basename="projects")
router.register("teams", TeamViewSet, basename="teams")
router.register(
    "evaluation-forms",
    EvaluationFormViewSet,
    basename="evaluation-forms",
)
router.register("evaluations", EvaluationViewSet, basename="evaluations")


app_name = "api"
urlpatterns = [
    path(
        "audit/",
        include(("team_sync.audit.api.urls", "audit"), namespace="audit"),
    ),
    path("presentations/", include("team_sync.presentations.api.urls")),
    *router.urls,
]
