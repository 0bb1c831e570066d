from __future__ import annotations

from typing import Any

from team_sync.realtime.socketio import trigger

# Event names shared with the SPA.
TIMER_UPDATE = "timer-update"
QUEUE_UPDATE = "queue-update"
EVALUATION_TOGGLE = "evaluation-toggle"
PRESENTATION_START = "presentation-start"
PRESENTATION_END = "presentation-end"
CURRENT_TEAM_UPDATE = "current-team-update"
EVALUATION_FORM_UPDATE = "evaluation-form-update"
EVALUATION_SUBMITTED = "evaluation-submitted"


def presentation_channel(project_id: Any) -> str:
    return f"presentation-{project_id}"


def queue_channel(project_id: Any) -> str:
    return f"queue-{project_id}"


def publish_presentation_start(project_id, team) -> None:
    trigger(presentation_channel(project_id), PRESENTATION_START, {"team": team, "timer": 0})


def publish_presentation_end(project_id, team) -> None:
    trigger(presentation_channel(project_id), PRESENTATION_END, {"team": team})


def publish_queue(project_id, teams) -> None:
    trigger(queue_channel(project_id), QUEUE_UPDATE, {"teams": teams})


def publish_evaluation_toggle(project_id, enabled, time_limit=None) -> None:
    payload: dict[str, Any] = {"enabled": enabled}
    if time_limit is not None:
        payload["timeLimit"] = time_limit
    trigger(presentation_channel(project_id), EVALUATION_TOGGLE, payload)


def publish_current_team(project_id, team) -> None:
    trigger(presentation_channel(project_id), CURRENT_TEAM_UPDATE, {"team": team})


def publish_timer(project_id, timer, team) -> None:
    trigger(presentation_channel(project_id), TIMER_UPDATE, {"timer": timer, "team": team})


def publish_evaluation_form(project_id, form: dict[str, Any]) -> None:
    """Push the form to peers and open the evaluation window with its time limit."""

    trigger(presentation_channel(project_id), EVALUATION_FORM_UPDATE, form)
    publish_evaluation_toggle(project_id, True, time_limit=form.get("evaluationTime"))


def publish_evaluation_submitted(project_id, payload: dict[str, Any]) -> None:
    trigger(presentation_channel(project_id), EVALUATION_SUBMITTED, payload)
