"""
Request ID plumbing for logging.

``RequestIDMiddleware`` tags each request with a short id and
``RequestIDFilter`` copies it onto every log record emitted while that
request is being handled.
"""
import logging
import threading
import uuid

_local = threading.local()

REQUEST_ID_HEADER = 'X-Request-ID'


def get_request_id():
    return getattr(_local, 'request_id', None)


class RequestIDFilter(logging.Filter):
    """Add ``record.request_id`` (``N/A`` outside a request)."""

    def filter(self, record):
        if not getattr(record, 'request_id', None):
            record.request_id = get_request_id() or 'N/A'
        return True


class RequestIDMiddleware:
    """
    Generate a request id, expose it as ``request.request_id`` and echo it
    back in the ``X-Request-ID`` response header.
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request_id = uuid.uuid4().hex[:8]
        request.request_id = request_id
        _local.request_id = request_id
        try:
            response = self.get_response(request)
        finally:
            _local.request_id = None
        response[REQUEST_ID_HEADER] = request_id
        return response

    def process_exception(self, request, exception):
        """Log exceptions that escape the view layer."""
        logging.getLogger('django.request').error(
            'Exception: %s: %s',
            type(exception).__name__,
            exception,
            exc_info=True,
            extra={'request_id': getattr(request, 'request_id', 'N/A')},
        )
