# middleware file
import logging
import time

from django.conf import settings
from django.db import connection

logger = logging.getLogger(__name__)


class RequestTimingMiddleware:
    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        # Skip timing in production when DEBUG is False
        if not settings.DEBUG:
            return self.get_response(request)

        start_time = time.time()
        initial_queries = len(connection.queries)

        response = self.get_response(request)

        total_time = time.time() - start_time
        executed = connection.queries[initial_queries:]
        db_time = sum(float(q["time"]) for q in executed)

        logger.info(
            f"{request.method} {request.path} -> {response.status_code} "
            f"total={total_time:.3f}s db={db_time:.3f}s queries={len(executed)}"
        )

        return response
