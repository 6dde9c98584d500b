import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """
    Domain error carrying the HTTP status it maps to.

    Subclasses set ``status_code`` and ``default_message``; ``details`` is
    any JSON-serializable context for the client.
    """
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = 'Internal server error'

    def __init__(self, message=None, details=None):
        self.message = message or self.default_message
        self.details = details if details is not None else {}
        super().__init__(self.message)

    def as_payload(self):
        return {'error': self.message, 'details': self.details}


def _first_message(data):
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        for value in data.values():
            return _first_message(value)
    if isinstance(data, (list, tuple)) and data:
        return _first_message(data[0])
    return str(data)


def api_exception_handler(exc, context):
    """
    Render every API error as ``{"error": ..., "details": ...}``.

    Django ``ValidationError`` (raised by model status transitions) becomes
    a 400 instead of a server error.
    """
    if isinstance(exc, ServiceError):
        if exc.status_code >= 500:
            logger.error(f"{exc.__class__.__name__}: {exc.message}")
        return Response(exc.as_payload(), status=exc.status_code)

    if isinstance(exc, DjangoValidationError):
        details = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
        return Response(
            {'error': _first_message(details), 'details': details},
            status=status.HTTP_400_BAD_REQUEST,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, APIException):
        details = response.data
        response.data = {'error': _first_message(details), 'details': details}
    return response
