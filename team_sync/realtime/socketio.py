"""Global Socket.IO server used as the broadcast transport.

A broadcast *channel* (``presentation-<projectId>`` or ``queue-<projectId>``)
is a Socket.IO room and a broadcast *event* is a Socket.IO event name.

Frontend convention:
- Socket.IO path: /ws/presentations/
- Auth: `query.token` or `auth.token` (JWT access token)
- After connecting, emit `subscribe` with a channel name to start receiving
  that channel's events.

Delivery is at-most-once. Nothing is replayed to late subscribers.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import parse_qs

import socketio
from asgiref.sync import async_to_sync
from channels.db import database_sync_to_async
from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import TokenError

logger = logging.getLogger(__name__)

CHANNEL_PATTERN = re.compile(r"^((presentation|queue)-[A-Za-z0-9_]+|teams)$")


class BroadcastUnavailable(RuntimeError):
    """Raised when broadcasting is switched off in settings."""


def _build_client_manager():
    redis_url = getattr(settings, "REDIS_URL", "")
    if not redis_url:
        return None
    return socketio.AsyncRedisManager(redis_url)


sio = socketio.AsyncServer(
    async_mode="asgi",
    cors_allowed_origins="*",
    client_manager=_build_client_manager(),
    logger=False,
    engineio_logger=False,
)


@dataclass(frozen=True)
class UserRealtimeContext:
    user_id: int
    role: str


def is_valid_channel(channel: Any) -> bool:
    return isinstance(channel, str) and bool(CHANNEL_PATTERN.match(channel))


@database_sync_to_async
def _get_user_context_from_access_token(token: str) -> UserRealtimeContext:
    jwt_auth = JWTAuthentication()
    validated = jwt_auth.get_validated_token(token)
    user = jwt_auth.get_user(validated)
    return UserRealtimeContext(user_id=int(user.id), role=str(user.role))


def _extract_token(environ: dict[str, Any], auth: Any | None) -> str | None:
    """Extract JWT token from Socket.IO environ/auth.

    Handles python-socketio environ shapes across ASGI/WSGI servers.
    """

    scope: Any = environ
    if isinstance(environ, dict) and "asgi.scope" in environ:
        inner = environ.get("asgi.scope")
        if isinstance(inner, dict):
            scope = inner

    query_string: str | bytes = ""
    if isinstance(scope, dict) and "query_string" in scope:
        query_string = scope.get("query_string", b"")
    elif isinstance(scope, dict) and "QUERY_STRING" in scope:
        query_string = scope.get("QUERY_STRING", "")

    if isinstance(query_string, (bytes, bytearray)):
        query_string = query_string.decode(errors="ignore")

    token = parse_qs(str(query_string)).get("token", [None])[0]
    if isinstance(token, str) and token:
        return token

    if isinstance(auth, dict):
        auth_token = auth.get("token")
        if isinstance(auth_token, str) and auth_token:
            return auth_token

    return None


@sio.event
async def connect(sid: str, environ: dict[str, Any], auth: Any | None = None):
    token = _extract_token(environ, auth)
    if not token:
        msg = "unauthorized"
        raise ConnectionRefusedError(msg)

    try:
        ctx = await _get_user_context_from_access_token(token)
    except (TokenError, AuthenticationFailed) as exc:
        # InvalidToken carries the per-token-type messages in its detail.
        msg = "jwt_expired" if "token is expired" in str(exc).lower() else "unauthorized"
        raise ConnectionRefusedError(msg) from exc
    except Exception as exc:
        logger.exception("Socket.IO connect error")
        msg = "server_error"
        raise ConnectionRefusedError(msg) from exc

    await sio.save_session(sid, {"user_id": ctx.user_id, "role": ctx.role})


@sio.event
async def disconnect(sid: str):
    _ = sid


@sio.event
async def subscribe(sid: str, channel: Any):
    if not is_valid_channel(channel):
        await sio.emit(
            "subscription_error",
            {"channel": channel, "error": "Unknown channel"},
            to=sid,
        )
        return
    await sio.enter_room(sid, channel)
    await sio.emit("subscription_succeeded", {"channel": channel}, to=sid)


@sio.event
async def unsubscribe(sid: str, channel: Any):
    if is_valid_channel(channel):
        await sio.leave_room(sid, channel)


def trigger(channel: str, event: str, payload: Any) -> None:
    """Emit ``event`` with ``payload`` to every subscriber of ``channel``.

    Called from sync Django code. Raises :class:`BroadcastUnavailable` when
    broadcasting is disabled; transport errors propagate unchanged.
    """

    if not getattr(settings, "REALTIME_BROADCAST_ENABLED", True):
        raise BroadcastUnavailable(channel)
    async_to_sync(sio.emit)(event, payload, room=channel)
