# config/exceptions.py
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from .constants import LOGIN_ROUTE

logger = logging.getLogger(__name__)


def _first_message(detail):
    """Pull the first human readable message out of a DRF error detail."""
    if isinstance(detail, dict):
        for value in detail.values():
            message = _first_message(value)
            if message:
                return message
        return None
    if isinstance(detail, (list, tuple)):
        for value in detail:
            message = _first_message(value)
            if message:
                return message
        return None
    return str(detail) if detail is not None else None


def api_exception_handler(exc, context):
    """
    Render every API error as ``{"error": "<message>"}``.

    - Field validation errors keep their per-field detail under ``errors``.
    - 401 responses tell the client where to send the visitor.
    - Database failures become a 503 instead of a server error page.
    """
    if isinstance(exc, DatabaseError):
        view = context.get("view")
        logger.exception(f"Database error in {view.__class__.__name__ if view else 'unknown view'}: {exc}")
        return Response(
            {"error": "Service temporarily unavailable."},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    response = exception_handler(exc, context)
    if response is None:
        return None

    if response.status_code == status.HTTP_401_UNAUTHORIZED:
        response.data = {"error": "Authentication required.", "redirect": LOGIN_ROUTE}
        return response

    detail = response.data
    payload = {"error": _first_message(detail) or "Request failed."}
    if isinstance(exc, ValidationError) and isinstance(detail, dict):
        field_errors = {key: value for key, value in detail.items() if key not in ("error", "non_field_errors")}
        if field_errors:
            payload["errors"] = field_errors
    response.data = payload
    return response
