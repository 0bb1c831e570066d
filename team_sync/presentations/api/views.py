"""Live presentation session relay.

Each endpoint forwards the posted payload to the project's broadcast channel
and keeps nothing on the server. Clients hold the session state (timer,
queue, evaluation window) and the last message received wins.
"""

from __future__ import annotations

import logging
from typing import Any

from drf_spectacular.utils import OpenApiExample
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from team_sync.realtime.events import presentations as events
from team_sync.realtime.socketio import BroadcastUnavailable
from team_sync.users.api.permissions import IsSessionController

logger = logging.getLogger(__name__)

_OBJECT_BODY = {"application/json": {"type": "object"}}
_MESSAGE_RESPONSE = {
    200: {"type": "object", "properties": {"message": {"type": "string"}}},
}


class RelayView(APIView):
    """Validate, broadcast, and answer ``{"message": ...}``.

    Subclasses set the messages and implement :meth:`publish`.
    """

    permission_classes = [IsSessionController]
    success_message = ""
    failure_message = ""

    def validate(self, data) -> Response | None:
        return None

    def publish(self, project_id: int, data) -> None:
        raise NotImplementedError

    def broadcast_unavailable(self) -> Response:
        return Response({"message": self.success_message})

    def post(self, request, project_id: int):
        data = request.data
        error = self.validate(data)
        if error is not None:
            return error
        try:
            self.publish(project_id, data)
        except BroadcastUnavailable:
            logger.warning(
                "Broadcast disabled, skipped %s for project %s",
                self.__class__.__name__,
                project_id,
            )
            return self.broadcast_unavailable()
        except Exception:
            logger.exception("%s (project %s)", self.failure_message, project_id)
            return Response(
                {"error": self.failure_message},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )
        return Response({"message": self.success_message})


@extend_schema(
    tags=["Presentations"],
    request=_OBJECT_BODY,
    responses=_MESSAGE_RESPONSE,
    examples=[OpenApiExample("Start", value={"team": {"id": 3}}, request_only=True)],
)
class StartPresentationView(RelayView):
    success_message = "Presentation started"
    failure_message = "Failed to start presentation"

    def publish(self, project_id, data):
        events.publish_presentation_start(project_id, data.get("team"))


@extend_schema(tags=["Presentations"], request=_OBJECT_BODY, responses=_MESSAGE_RESPONSE)
class EndPresentationView(RelayView):
    success_message = "Presentation ended"
    failure_message = "Failed to end presentation"

    def publish(self, project_id, data):
        events.publish_presentation_end(project_id, data.get("team"))


@extend_schema(
    tags=["Presentations"],
    request=_OBJECT_BODY,
    responses=_MESSAGE_RESPONSE,
    examples=[
        OpenApiExample("Queue", value={"teams": [{"id": 3}, {"id": 5}]}, request_only=True),
    ],
)
class QueueView(RelayView):
    success_message = "Queue updated"
    failure_message = "Failed to update queue"

    def publish(self, project_id, data):
        events.publish_queue(project_id, data.get("teams"))


@extend_schema(tags=["Presentations"], request=_OBJECT_BODY, responses=_MESSAGE_RESPONSE)
class EvaluationToggleView(RelayView):
    success_message = "Evaluation toggled"
    failure_message = "Failed to toggle evaluation"

    def publish(self, project_id, data):
        events.publish_evaluation_toggle(project_id, data.get("enabled"))


@extend_schema(tags=["Presentations"], request=_OBJECT_BODY, responses=_MESSAGE_RESPONSE)
class CurrentTeamView(RelayView):
    success_message = "Current team updated"
    failure_message = "Failed to update current team"

    def publish(self, project_id, data):
        events.publish_current_team(project_id, data.get("team"))


@extend_schema(
    tags=["Presentations"],
    request=_OBJECT_BODY,
    responses=_MESSAGE_RESPONSE,
    examples=[
        OpenApiExample("Tick", value={"timer": 42, "team": {"id": 3}}, request_only=True),
    ],
)
class TimerView(RelayView):
    success_message = "Timer and team updated"
    failure_message = "Failed to update timer"

    def validate(self, data):
        timer: Any = data.get("timer")
        if isinstance(timer, bool) or not isinstance(timer, (int, float)):
            return Response(
                {"error": "Timer must be a number"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return None

    def publish(self, project_id, data):
        events.publish_timer(project_id, data["timer"], data.get("team"))

    def broadcast_unavailable(self):
        return Response({"message": "Timer updated (broadcast not available)"})


@extend_schema(tags=["Presentations"], request=_OBJECT_BODY, responses=_MESSAGE_RESPONSE)
class EvaluationFormPushView(RelayView):
    success_message = "Evaluation form pushed to peers"
    failure_message = "Failed to push evaluation form"

    def validate(self, data):
        if not isinstance(data.get("form"), dict):
            return Response(
                {"error": "Form is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return None

    def publish(self, project_id, data):
        events.publish_evaluation_form(project_id, data["form"])

    def broadcast_unavailable(self):
        return Response(
            {"error": "Broadcast service not available"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
