"""
Liveness endpoint for load balancers and uptime monitors.
"""
import logging

from django.db import connection, DatabaseError
from django.http import JsonResponse
from django.utils import timezone
from django.views import View

logger = logging.getLogger(__name__)


class HealthCheckView(View):
    """Reports 200 when the database answers, 503 otherwise. No auth."""

    def get(self, request):
        database_ok = self._database_available()
        body = {
            'status': 'healthy' if database_ok else 'unhealthy',
            'database': 'up' if database_ok else 'down',
            'timestamp': timezone.now().isoformat(),
        }
        return JsonResponse(body, status=200 if database_ok else 503)

    def _database_available(self):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                return cursor.fetchone() == (1,)
        except DatabaseError:
            logger.exception("Database health check failed")
            return False
