# shared/common/middleware.py
"""
Request tracing and access logging middleware.
"""

import logging
import time
import uuid
from typing import Callable

from django.http import HttpRequest, HttpResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = 'X-Request-ID'
REQUEST_ID_MAX_LENGTH = 64
UNLOGGED_PATH_PREFIXES = ('/health/', '/static/')


class RequestIDMiddleware:
    """
    Tags each request and response with a request id.

    An incoming `X-Request-ID` is reused so a request can be traced across
    services; otherwise a new one is generated.
    """

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request_id = request.headers.get(REQUEST_ID_HEADER, '')[:REQUEST_ID_MAX_LENGTH]
        request.request_id = request_id or str(uuid.uuid4())

        response = self.get_response(request)
        response[REQUEST_ID_HEADER] = request.request_id
        return response


class LoggingMiddleware:
    """Logs one line per completed request."""

    def __init__(self, get_response: Callable):
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        if request.path.startswith(UNLOGGED_PATH_PREFIXES):
            return self.get_response(request)

        start = time.monotonic()
        response = self.get_response(request)
        duration_ms = round((time.monotonic() - start) * 1000, 2)

        user = getattr(request, 'user', None)
        log_method = logger.warning if response.status_code >= 400 else logger.info
        log_method(
            f"{request.method} {request.path} - {response.status_code}",
            extra={
                'request_id': getattr(request, 'request_id', None),
                'method': request.method,
                'path': request.path,
                'status_code': response.status_code,
                'duration_ms': duration_ms,
                'user_id': getattr(user, 'pk', None),
                'ip_address': self.get_client_ip(request),
            }
        )

        response['X-Response-Time'] = f"{duration_ms:.2f}ms"
        return response

    def get_client_ip(self, request: HttpRequest) -> str:
        forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
        if forwarded_for:
            return forwarded_for.split(',')[0].strip()
        return request.META.get('REMOTE_ADDR', '')
