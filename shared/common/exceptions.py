# shared/common/exceptions.py
"""
API exception hierarchy and the DRF exception handler.

Every error leaves the API in the same envelope::

    {"success": false, "error": {"code": ..., "message": ..., "details": ..., "request_id": ...}}
"""

import logging
import traceback
from typing import Dict, Any, Optional
from rest_framework import status
from rest_framework.views import exception_handler
from rest_framework.response import Response
from rest_framework.exceptions import APIException
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db.models import ProtectedError
from django.conf import settings

logger = logging.getLogger(__name__)


class BaseAPIException(APIException):
    """Base class carrying a machine readable ``error_code``."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'An unexpected error occurred.'
    default_code = 'error'
    error_code = 'INTERNAL_ERROR'

    def __init__(
        self,
        detail: Optional[str] = None,
        code: Optional[str] = None,
        error_code: Optional[str] = None,
        extra_data: Optional[Dict] = None
    ):
        super().__init__(detail=detail, code=code)
        self.error_code = error_code or self.error_code
        self.extra_data = extra_data or {}


class ValidationException(BaseAPIException):
    """400, with per-field messages in ``errors``."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Validation error.'
    default_code = 'validation_error'
    error_code = 'VALIDATION_ERROR'

    def __init__(self, errors: Dict[str, Any], detail: str = None):
        super().__init__(detail=detail, extra_data={'errors': errors})
        self.errors = errors


class ForbiddenException(BaseAPIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'
    error_code = 'FORBIDDEN'


class NotFoundException(BaseAPIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'The requested resource was not found.'
    default_code = 'not_found'
    error_code = 'NOT_FOUND'


class ConflictException(BaseAPIException):
    """409, the resource is in a state that forbids the request."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with the current state of the resource.'
    default_code = 'conflict'
    error_code = 'CONFLICT'


class ServiceUnavailableException(BaseAPIException):
    """503, an upstream (e.g. a webhook) could not be reached."""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = 'The service is temporarily unavailable.'
    default_code = 'service_unavailable'
    error_code = 'SERVICE_UNAVAILABLE'


def _envelope(code: str, message: str, request_id: Optional[str], details: Any = None) -> Dict[str, Any]:
    error = {'code': code, 'message': message, 'request_id': request_id}
    if details:
        error['details'] = details
    return {'success': False, 'error': error}


def custom_exception_handler(exc, context) -> Optional[Response]:
    """
    DRF ``EXCEPTION_HANDLER``.

    DRF-known exceptions keep their status code and are re-wrapped. Django
    validation errors raised from model validators become 400s, and deletes
    blocked by a protected foreign key become 409s. Anything else is logged
    and returned as a 500.
    """
    request = context.get('request')
    request_id = getattr(request, 'request_id', None) if request else None

    response = exception_handler(exc, context)
    if response is not None:
        return format_error_response(exc, response, request_id)

    if isinstance(exc, DjangoValidationError):
        errors = exc.message_dict if hasattr(exc, 'message_dict') else {'detail': exc.messages}
        return Response(
            _envelope('VALIDATION_ERROR', 'Validation error', request_id, errors),
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, ProtectedError):
        return Response(
            _envelope(
                'PROTECTED',
                'This record is still referenced and cannot be deleted.',
                request_id,
                {'referenced_by': sorted({str(obj) for obj in exc.protected_objects})},
            ),
            status=status.HTTP_409_CONFLICT
        )

    logger.exception(
        f"Unhandled exception: {exc}",
        extra={
            'request_id': request_id,
            'exception_type': type(exc).__name__,
        }
    )

    if settings.DEBUG:
        body = _envelope('INTERNAL_ERROR', str(exc), request_id)
        body['error']['traceback'] = traceback.format_exc().split('\n')
        return Response(body, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    return Response(
        _envelope('INTERNAL_ERROR', 'An unexpected error occurred. Please try again later.', request_id),
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )


def format_error_response(exc, response: Response, request_id: str = None) -> Response:
    """Re-wrap a response produced by DRF's own handler."""
    extra_data = getattr(exc, 'extra_data', {})

    if extra_data.get('errors'):
        details = extra_data['errors']
    elif isinstance(response.data, dict) and 'detail' not in response.data:
        # serializer field errors
        details = response.data
    else:
        details = None

    response.data = _envelope(
        getattr(exc, 'error_code', None) or _default_code(response.status_code),
        get_error_message(exc, response),
        request_id,
        details,
    )
    return response


def _default_code(status_code: int) -> str:
    return {
        status.HTTP_400_BAD_REQUEST: 'VALIDATION_ERROR',
        status.HTTP_401_UNAUTHORIZED: 'NOT_AUTHENTICATED',
        status.HTTP_403_FORBIDDEN: 'FORBIDDEN',
        status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
        status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
    }.get(status_code, 'ERROR')


def get_error_message(exc, response: Response) -> str:
    detail = getattr(exc, 'detail', None)
    if isinstance(detail, str):
        return detail
    if isinstance(detail, list) and detail:
        return str(detail[0])
    if isinstance(detail, dict):
        if 'detail' in detail:
            return str(detail['detail'])
        return 'Validation error'

    if isinstance(response.data, dict):
        return str(response.data.get('detail', response.data))
    return str(response.data)
