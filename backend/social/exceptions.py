"""
Custom Exception Handler for DRF

Provides consistent error response format across the API:

    {"success": false, "error": "<message>"}

Service errors map to status codes here, so views never catch them.
"""
import logging

from django.db import IntegrityError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .errors import ConflictError, NotAuthorizedError, NotFoundError, PrivacyError

logger = logging.getLogger(__name__)

ERROR_STATUS = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotAuthorizedError, status.HTTP_403_FORBIDDEN),
    (PrivacyError, status.HTTP_403_FORBIDDEN),
)


def error_response(message, code, details=None):
    body = {'success': False, 'error': message}
    if details is not None:
        body['details'] = details
    return Response(body, status=code)


def custom_exception_handler(exc, context):
    """
    Custom exception handler that:
    1. Maps social service errors to status codes
    2. Converts Django exceptions to DRF responses
    3. Logs anything unexpected
    """
    for error_class, code in ERROR_STATUS:
        if isinstance(exc, error_class):
            logger.info("%s: %s", type(exc).__name__, exc)
            return error_response(str(exc), code)

    # Call DRF's default exception handler for its own exceptions
    response = exception_handler(exc, context)
    if response is not None:
        if not isinstance(response.data, dict) or 'error' not in response.data:
            response.data = {
                'success': False,
                'error': str(getattr(exc, 'default_detail', exc)),
                'details': response.data
            }
        return response

    if isinstance(exc, IntegrityError):
        logger.warning("IntegrityError: %s", exc)
        return error_response(
            'Data integrity error. This may be a duplicate entry.',
            status.HTTP_409_CONFLICT
        )

    if isinstance(exc, ValueError):
        return error_response(str(exc), status.HTTP_400_BAD_REQUEST)

    logger.exception("Unhandled exception: %s", exc)
    return error_response(
        'An unexpected error occurred.',
        status.HTTP_500_INTERNAL_SERVER_ERROR
    )
