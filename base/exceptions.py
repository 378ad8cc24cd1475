"""
Domain exceptions and the project-wide DRF exception handler.

Every refusal leaves the API in one shape::

    {"error": {"code": "<code>", "message": "<text>", "field": "<optional>"}}

Serializer validation failures carry the per-field messages under
``fields`` instead of a single ``field``.
"""

import logging

from rest_framework import status
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class DomainError(APIException):
    """Base for refusals raised by the mutation services."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "The request could not be applied."
    default_code = "domain_error"
    field = None

    def __init__(self, detail=None, code=None, field=None):
        super().__init__(detail, code)
        if field is not None:
            self.field = field


class InvariantViolation(DomainError):
    """The mutation would break a data invariant."""

    default_detail = "The request violates a data invariant."
    default_code = "invariant_violation"


class HasDependents(InvariantViolation):
    """The resource still owns dependent records and cannot be deleted."""

    default_detail = "The resource still has dependent records."
    default_code = "has_dependents"


class Conflict(DomainError):
    """The resource already exists or a unique slot is already taken."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = "The request conflicts with the current state."
    default_code = "conflict"


STATUS_ERROR_CODES = {
    status.HTTP_401_UNAUTHORIZED: "not_authenticated",
    status.HTTP_403_FORBIDDEN: "forbidden",
    status.HTTP_404_NOT_FOUND: "not_found",
}


def _error_code(exc, status_code):
    if status_code in STATUS_ERROR_CODES:
        return STATUS_ERROR_CODES[status_code]
    if isinstance(exc, APIException):
        codes = exc.get_codes()
        if isinstance(codes, str):
            return codes
        return exc.default_code
    return "error"


def _error_message(data):
    if isinstance(data, dict):
        detail = data.get("detail", data)
    else:
        detail = data
    if isinstance(detail, list) and detail:
        detail = detail[0]
    return str(detail)


def api_exception_handler(exc, context):
    """Render DRF and domain exceptions into the shared error envelope."""
    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, ValidationError):
        fields = response.data
        if not isinstance(fields, dict):
            fields = {"non_field_errors": fields}
        error = {
            "code": "validation_error",
            "message": "Invalid input.",
            "fields": fields,
        }
    else:
        error = {
            "code": _error_code(exc, response.status_code),
            "message": _error_message(response.data),
        }
        field = getattr(exc, "field", None)
        if field:
            error["field"] = field

    if response.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        view = context.get("view")
        logger.error(
            f"API error in {view.__class__.__name__ if view else 'unknown view'}: {error['message']}"
        )

    response.data = {"error": error}
    return response
