from __future__ import annotations

from typing import Any

from team_sync.realtime.socketio import trigger

TEAMS_CHANNEL = "teams"


def publish_team_updated(team_data: dict[str, Any]) -> None:
    trigger(TEAMS_CHANNEL, "updated", team_data)


def publish_member_added(team_id: int, member_id: str) -> None:
    trigger(TEAMS_CHANNEL, "member-added", {"teamId": team_id, "memberId": member_id})
