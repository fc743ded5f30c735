"""
Error types raised by the records core and the DRF exception handler
that turns every API error into ``{"success": false, "message": ...}``.
"""
import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

logger = logging.getLogger(__name__)


class VisitTransitionError(ValueError):
    """A visit lifecycle operation was attempted from a state that forbids it."""


class ImmutableRecordError(RuntimeError):
    """An append-only row was asked to change or disappear."""


def _message_from(data):
    if isinstance(data, dict):
        if 'detail' in data:
            return str(data['detail'])
        field, errors = next(iter(data.items()), (None, None))
        if isinstance(errors, (list, tuple)) and errors:
            errors = errors[0]
        return f"{field}: {errors}" if field not in (None, 'non_field_errors') else str(errors)
    if isinstance(data, (list, tuple)) and data:
        return str(data[0])
    return str(data)


def api_exception_handler(exc, context):
    resp = drf_exception_handler(exc, context)
    if resp is None:
        if isinstance(exc, VisitTransitionError):
            return Response({'success': False, 'message': str(exc)}, status=status.HTTP_409_CONFLICT)
        logger.exception("Unhandled API error in %s", context.get('view').__class__.__name__)
        return Response({'success': False, 'message': 'Internal server error'}, status=500)
    payload = {'success': False, 'message': _message_from(resp.data)}
    if isinstance(resp.data, dict) and 'detail' not in resp.data:
        payload['errors'] = resp.data
    return Response(payload, status=resp.status_code, headers=_auth_headers(resp))


def _auth_headers(resp):
    headers = {}
    for name in ('WWW-Authenticate', 'Retry-After'):
        if resp.has_header(name):
            headers[name] = resp[name]
    return headers
