"""DRF exception handler producing the ``{error, details?}`` body."""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

logger = logging.getLogger('apps.common')

GENERIC_ERROR = 'Something went wrong'


def _flatten(detail):
    """Return the first human readable message inside an error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            return _flatten(value)
        return ''
    if isinstance(detail, (list, tuple)):
        return _flatten(detail[0]) if detail else ''
    return str(detail)


def api_exception_handler(exc, context):
    """
    Reshape every error response into ``{"error": ..., "details": ...}``.

    Validation errors keep their per-field messages under ``details``.
    Anything DRF does not know how to render is logged with its traceback
    and answered with a generic 500 so no internals leak to the client.
    """
    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    response = exception_handler(exc, context)

    if response is None:
        view = context.get('view')
        logger.error(
            'Unhandled error in %s: %s',
            type(view).__name__ if view else 'unknown view',
            exc,
            exc_info=exc,
        )
        set_rollback()
        return Response({'error': GENERIC_ERROR}, status=500)

    if isinstance(exc, exceptions.ValidationError):
        if isinstance(exc.detail, dict):
            body = {'error': 'Invalid input', 'details': response.data}
        else:
            body = {'error': _flatten(exc.detail) or 'Invalid input'}
            if len(exc.detail) > 1:
                body['details'] = response.data
    else:
        body = {'error': _flatten(exc.detail)}

    if response.status_code >= 400 and response.status_code != 401:
        logger.warning(
            'Request refused (%s): %s', response.status_code, body['error']
        )

    response.data = body
    return response
