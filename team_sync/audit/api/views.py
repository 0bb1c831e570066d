from __future__ import annotations

from typing import TYPE_CHECKING

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from team_sync.audit.api.serializers import AuditLogSerializer
from team_sync.audit.models import AuditLog
from team_sync.users.api.permissions import ROLE_ADMIN
from team_sync.users.api.permissions import ROLE_LAB_INSTRUCTOR
from team_sync.users.api.permissions import _is_staff_or_role

if TYPE_CHECKING:
    from django.db.models import QuerySet


@extend_schema(tags=["Audit"], responses=AuditLogSerializer(many=True))
class RecentAuditView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not _is_staff_or_role(request.user, [ROLE_ADMIN, ROLE_LAB_INSTRUCTOR]):
            return Response({"detail": "Forbidden"}, status=403)

        try:
            limit = int(request.query_params.get("limit", "5"))
        except (TypeError, ValueError):
            limit = 5
        limit = max(1, min(limit, 50))

        qs: QuerySet[AuditLog] = AuditLog.objects.select_related("actor").all()
        action = request.query_params.get("action")
        if action:
            qs = qs.filter(action=action)
        rows = list(qs[:limit])
        data = AuditLogSerializer(rows, many=True).data
        return Response({"results": data, "limit": limit})
