"""
Core views for health checks, readiness and metrics.
"""

import logging

from django.conf import settings
from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

logger = logging.getLogger(__name__)


def _database_connected() -> bool:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
    except DatabaseError as e:
        logger.error("Database health check failed: %s", e)
        return False
    return True


@method_decorator(csrf_exempt, name="dispatch")
class HealthView(View):
    """Health check endpoint."""

    def get(self, _request):
        """Return service health status."""
        return JsonResponse({"status": "healthy", "service": "license-service"})


@method_decorator(csrf_exempt, name="dispatch")
class HealthDBView(View):
    """Database health check endpoint."""

    def get(self, _request):
        """Check database connectivity."""
        if _database_connected():
            return JsonResponse({"status": "healthy", "database": "connected"})
        return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)


@method_decorator(csrf_exempt, name="dispatch")
class ReadyView(View):
    """
    Readiness check endpoint.

    The service can take traffic once the database answers and a
    signing secret is configured. Sales channels without credentials
    are reported but do not block readiness.
    """

    def get(self, _request):
        """Check if service is ready to accept traffic."""
        checks = {
            "database": _database_connected(),
            "signing": bool(getattr(settings, "LICENSE_SIGNING_SECRET", "")),
        }
        channels = {
            "gumroad": bool(getattr(settings, "GUMROAD_SELLER_ID", "")),
            "appsumo": bool(getattr(settings, "APPSUMO_SECRET", "")),
            "stripe": bool(getattr(settings, "STRIPE_WEBHOOK_SECRET", "")),
        }

        ready = all(checks.values())
        return JsonResponse(
            {
                "status": "ready" if ready else "not_ready",
                "checks": checks,
                "channels": channels,
            },
            status=200 if ready else 503,
        )


class MetricsView(View):
    """Prometheus scrape endpoint."""

    def get(self, _request):
        """Render the default registry in the text exposition format."""
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
