"""Standardised API error responses.

Every error leaves the API with the same envelope::

    {"type": "client_error", "errors": [{"code": ..., "detail": ..., "attr": ...}]}

Domain exceptions that reach DRF unhandled are mapped through the shared
taxonomy, so views only catch what they want to word differently.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler

from shared.domain.exceptions import (
    ConflictError,
    DomainError,
    IdempotentNoOp,
    NotFoundError,
    PermissionDenied,
)

logger = structlog.get_logger(__name__)

DOMAIN_STATUS_CODES = (
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (PermissionDenied, status.HTTP_403_FORBIDDEN),
    (IdempotentNoOp, status.HTTP_200_OK),
)


def domain_error_response(exc: DomainError) -> Response:
    """Translate a domain exception into a standard error response."""
    status_code = status.HTTP_400_BAD_REQUEST
    for error_class, mapped in DOMAIN_STATUS_CODES:
        if isinstance(exc, error_class):
            status_code = mapped
            break
    return Response(
        error_payload(
            [{"code": exc.code, "detail": str(exc), "attr": None}],
            status_code,
        ),
        status=status_code,
    )


def error_payload(errors: List[Dict[str, Any]], status_code: int) -> Dict[str, Any]:
    error_type = "server_error" if status_code >= 500 else "client_error"
    if status_code == status.HTTP_400_BAD_REQUEST and any(
        e.get("attr") for e in errors
    ):
        error_type = "validation_error"
    return {"type": error_type, "errors": errors}


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Optional[Response]:
    """DRF ``EXCEPTION_HANDLER`` producing the standard error envelope."""
    if isinstance(exc, DomainError):
        logger.info("api.domain_error", error=exc.code, detail=str(exc))
        return domain_error_response(exc)

    response = exception_handler(exc, context)
    if response is None:
        return None

    if isinstance(exc, exceptions.ValidationError):
        errors = list(_flatten_validation_errors(exc.get_full_details()))
    else:
        detail = response.data.get("detail", "") if isinstance(response.data, dict) else response.data
        code = getattr(exc, "default_code", "error")
        if isinstance(exc, exceptions.APIException):
            full = exc.get_full_details()
            if isinstance(full, dict) and "code" in full:
                code = full["code"]
        errors = [{"code": code, "detail": str(detail), "attr": None}]

    response.data = error_payload(errors, response.status_code)
    return response


def _flatten_validation_errors(details: Any, attr: Optional[str] = None):
    if isinstance(details, dict) and "message" in details and "code" in details:
        yield {"code": details["code"], "detail": details["message"], "attr": attr}
    elif isinstance(details, dict):
        for key, value in details.items():
            name = key if key != "non_field_errors" else None
            child = f"{attr}.{name}" if attr and name else (name or attr)
            yield from _flatten_validation_errors(value, child)
    elif isinstance(details, list):
        for index, item in enumerate(details):
            child = attr
            if isinstance(item, dict) and not ("message" in item and "code" in item):
                child = f"{attr}.{index}" if attr else str(index)
            yield from _flatten_validation_errors(item, child)
