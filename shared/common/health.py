"""
Health Check Module.

Liveness and readiness endpoints for the services.
"""
import logging
import time
from typing import Any, Dict

from django.conf import settings
from django.db import DatabaseError, connection
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


class HealthStatus:
    """Health check status constants."""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


def check_database() -> Dict[str, Any]:
    """Check database connectivity."""
    start = time.monotonic()
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError as e:
        logger.error(f"Database health check failed: {e}")
        return {"name": "database", "status": HealthStatus.UNHEALTHY, "error": str(e)}

    return {
        "name": "database",
        "status": HealthStatus.HEALTHY,
        "latency_ms": round((time.monotonic() - start) * 1000, 2),
    }


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def liveness_check(request):
    """The process is up and serving requests."""
    return Response({
        "status": HealthStatus.HEALTHY,
        "service": getattr(settings, 'SERVICE_NAME', 'unknown'),
    })


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def readiness_check(request):
    """The service can reach its database."""
    database = check_database()
    healthy = database["status"] == HealthStatus.HEALTHY

    return Response(
        {
            "status": HealthStatus.HEALTHY if healthy else HealthStatus.UNHEALTHY,
            "service": getattr(settings, 'SERVICE_NAME', 'unknown'),
            "checks": [database],
        },
        status=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
    )
