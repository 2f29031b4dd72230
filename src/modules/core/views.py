"""Operational endpoints: liveness/readiness probe and token introspection."""

import time
from typing import Any, Callable, Dict

import structlog
from django.conf import settings
from django.core.cache import cache
from django.db import DatabaseError, connections
from django.http import HttpRequest, JsonResponse
from django.utils import timezone
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.availability.policy import BookingPolicy

logger = structlog.get_logger(__name__)

HEALTH_CACHE_KEY = "_health_check"


def _probe_database() -> None:
    conn = connections["default"]
    conn.ensure_connection()
    with conn.cursor() as cursor:
        cursor.execute("SELECT 1")
        cursor.fetchone()


def _probe_cache() -> None:
    cache.set(HEALTH_CACHE_KEY, "ok", 10)
    if cache.get(HEALTH_CACHE_KEY) != "ok":
        raise ConnectionError("Cache read-back mismatch")


PROBES: Dict[str, Callable[[], None]] = {
    "database": _probe_database,
    "cache": _probe_cache,
}


def _timed(name: str, probe: Callable[[], None]) -> Dict[str, Any]:
    started = time.monotonic()
    try:
        probe()
    except (DatabaseError, ConnectionError, OSError) as exc:
        logger.error("health_check.probe_failed", service=name, error=str(exc))
        return {"status": "down"}
    return {
        "status": "up",
        "response_time_ms": round((time.monotonic() - started) * 1000, 2),
    }


def health_check(request: HttpRequest) -> JsonResponse:
    """GET /health

    200 when every backing service answers, 503 otherwise.  Also reports
    the bakery's civil date and the booking policy in force, which is
    what an operator usually wants to confirm after a deploy.
    """
    services = {name: _timed(name, probe) for name, probe in PROBES.items()}
    healthy = all(s["status"] == "up" for s in services.values())
    policy = BookingPolicy.from_settings()

    logger.info("health_check.completed", healthy=healthy)

    return JsonResponse(
        {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": timezone.now().isoformat(),
            "civil_date": timezone.localdate().isoformat(),
            "time_zone": settings.TIME_ZONE,
            "booking_policy": {
                "capacity_per_day": policy.capacity_per_day,
                "booking_window_days": policy.booking_window_days,
            },
            "services": services,
        },
        status=200 if healthy else 503,
    )


class MeView(APIView):
    """Identity of the bearer token holder.

    The admin console calls this after login to decide whether to show
    the capacity calendar and order tables:
    * No token  -> 401
    * Bad token -> 401
    * Valid JWT -> 200 with ``is_staff``
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: HttpRequest) -> Response:
        return Response(
            {
                "user": str(request.user),
                "is_staff": bool(getattr(request.user, "is_staff", False)),
            }
        )
