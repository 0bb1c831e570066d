from django.urls import path

from .views import CurrentTeamView
from .views import EndPresentationView
from .views import EvaluationFormPushView
from .views import EvaluationToggleView
from .views import QueueView
from .views import StartPresentationView
from .views import TimerView

urlpatterns = [
    path(
        "<int:project_id>/start/",
        StartPresentationView.as_view(),
        name="presentation-start",
    ),
    path(
        "<int:project_id>/end/",
        EndPresentationView.as_view(),
        name="presentation-end",
    ),
    path("<int:project_id>/queue/", QueueView.as_view(), name="presentation-queue"),
    path(
        "<int:project_id>/evaluation/",
        EvaluationToggleView.as_view(),
        name="presentation-evaluation",
    ),
    path(
        "<int:project_id>/current-team/",
        CurrentTeamView.as_view(),
        name="presentation-current-team",
    ),
    path("<int:project_id>/timer/", TimerView.as_view(), name="presentation-timer"),
    path(
        "<int:project_id>/evaluation-form/",
        EvaluationFormPushView.as_view(),
        name="presentation-evaluation-form",
    ),
]
