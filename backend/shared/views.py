import os
import platform
import time

from django.conf import settings
from django.db import DatabaseError, connections
from django.utils import timezone
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

STARTED_AT = time.monotonic()


def check_databases():
    """Run a trivial query on every configured connection."""
    details = {}
    for alias in connections:
        try:
            with connections[alias].cursor() as cursor:
                cursor.execute("SELECT 1")
            details[alias] = "connected"
        except DatabaseError as exc:
            details[alias] = f"error: {exc}"
    return {"ok": all(state == "connected" for state in details.values()), "details": details}


def check_media_storage():
    # MEDIA_ROOT is created on the first upload, so a missing directory is fine
    root = settings.MEDIA_ROOT
    if not os.path.isdir(root):
        return {"ok": True, "path": str(root), "state": "not created"}
    writable = os.access(root, os.W_OK)
    return {"ok": writable, "path": str(root), "state": "writable" if writable else "read-only"}


class HealthCheckView(APIView):
    """Liveness report used by load balancers; 503 when a dependency is down."""

    authentication_classes = []
    permission_classes = [AllowAny]

    def get(self, request):
        database = check_databases()
        media = check_media_storage()
        healthy = database["ok"] and media["ok"]
        return Response(
            {
                "status": "ok" if healthy else "degraded",
                "uptime_seconds": int(time.monotonic() - STARTED_AT),
                "timestamp": timezone.now().isoformat(),
                "application": {
                    "name": settings.APPLICATION_NAME,
                    "python": platform.python_version(),
                },
                "database": database,
                "media": media,
            },
            status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        )
