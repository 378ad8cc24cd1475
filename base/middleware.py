"""
Request timing middleware.

Adds an X-Response-Time header to every response and logs slow requests.
"""

import logging
import time

from django.conf import settings
from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)


class RequestTimingMiddleware(MiddlewareMixin):
    """Measure request duration and warn above ``SLOW_REQUEST_THRESHOLD``."""

    def process_request(self, request):
        request._start_time = time.monotonic()

    def process_response(self, request, response):
        if not hasattr(request, "_start_time"):
            return response

        duration = time.monotonic() - request._start_time
        response["X-Response-Time"] = f"{duration:.3f}s"

        threshold = getattr(settings, "SLOW_REQUEST_THRESHOLD", 2.0)
        if duration > threshold:
            logger.warning(
                f"SLOW REQUEST: {request.method} {request.path} "
                f"took {duration:.2f}s - Status: {response.status_code}"
            )
        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"{request.method} {request.path} - "
                f"{duration:.3f}s - Status: {response.status_code}"
            )

        return response
