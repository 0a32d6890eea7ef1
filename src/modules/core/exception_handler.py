"""DRF exception handler: every error leaves the API in one envelope.

Wired through ``REST_FRAMEWORK["EXCEPTION_HANDLER"]``.  Views raise and
never build error responses themselves.

Envelope (``ErrorResponse``)::

    {
        "success": false,
        "status": 409,
        "errorCode": "INSUFFICIENT_STOCK",
        "message": "...",
        "error": "...",
        "timestamp": "2026-01-01T12:00:00Z",
        "path": "/api/products/1/reduce-stock",
        ...error specific fields (field, productId, operation, ...)
    }

Unexpected exceptions are reported as a generic 500; the traceback is
logged server-side only.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional

import structlog
from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.utils import timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler as drf_exception_handler

from modules.core.exceptions import DomainError

logger = structlog.get_logger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error."


class ErrorResponse(BaseModel):
    """Immutable error body.  ``None`` fields are omitted on render."""

    model_config = ConfigDict(frozen=True)

    success: bool = False
    status: int
    error_code: str = Field(serialization_alias="errorCode")
    message: str
    error: str
    timestamp: datetime
    path: str
    field: Optional[str] = None
    product_id: Optional[Any] = Field(default=None, serialization_alias="productId")
    operation: Optional[str] = None
    available_stock: Optional[int] = Field(
        default=None, serialization_alias="availableStock"
    )
    requested_quantity: Optional[int] = Field(
        default=None, serialization_alias="requestedQuantity"
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def http_status_for(exc: BaseException) -> int:
    """Map any exception raised in a view to its HTTP status code."""
    if isinstance(exc, DomainError):
        return exc.resolve().status_code
    if isinstance(exc, PydanticValidationError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, Http404):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, PermissionDenied):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, exceptions.APIException):
        return exc.status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def api_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    request = context.get("request")
    path = request.path if request is not None else ""
    status_code = http_status_for(exc)
    log = logger.bind(path=path, status_code=status_code)

    if isinstance(exc, DomainError):
        body = _domain_error_body(exc, status_code, path)
        if status_code >= 500:
            log.error("api.domain_error", error_code=body.error_code, exc_info=exc)
        else:
            log.warning(
                "api.domain_error", error_code=body.error_code, reason=str(exc)
            )
        return Response(body.to_dict(), status=status_code)

    if isinstance(exc, PydanticValidationError):
        body = _pydantic_error_body(exc, status_code, path)
        log.warning("api.invalid_payload", reason=body.message)
        return Response(body.to_dict(), status=status_code)

    response = drf_exception_handler(exc, context)
    if response is not None:
        body = ErrorResponse(
            status=response.status_code,
            error_code=_api_error_code(exc),
            message=_api_error_message(response.data),
            error="The request could not be processed.",
            timestamp=timezone.now(),
            path=path,
        )
        log.warning("api.request_error", error_code=body.error_code)
        response.data = body.to_dict()
        return response

    log.error("api.unhandled_error", exc_info=exc)
    body = ErrorResponse(
        status=status_code,
        error_code="INTERNAL_SERVER_ERROR",
        message=INTERNAL_ERROR_MESSAGE,
        error=INTERNAL_ERROR_MESSAGE,
        timestamp=timezone.now(),
        path=path,
    )
    return Response(body.to_dict(), status=status_code)


# ---------------------------------------------------------------------------
# Body builders
# ---------------------------------------------------------------------------


def _domain_error_body(
    exc: DomainError, status_code: int, path: str
) -> ErrorResponse:
    reported = exc.resolve()
    fields = dict(reported.response_fields())
    if reported is not exc:
        fields.update(
            {k: v for k, v in exc.response_fields().items() if v is not None}
        )

    return ErrorResponse(
        status=status_code,
        error_code=reported.error_code,
        message=reported.message,
        error=reported.details,
        timestamp=timezone.now(),
        path=path,
        **fields,
    )


def _pydantic_error_body(
    exc: PydanticValidationError, status_code: int, path: str
) -> ErrorResponse:
    errors = exc.errors()
    parts = [
        f"{'.'.join(str(loc) for loc in error['loc'])} - {error['msg']}"
        for error in errors
    ]
    first_loc = errors[0]["loc"] if errors else ()
    return ErrorResponse(
        status=status_code,
        error_code="VALIDATION_ERROR",
        message="Validation errors: " + "; ".join(parts),
        error="The supplied data is not valid.",
        timestamp=timezone.now(),
        path=path,
        field=str(first_loc[0]) if first_loc else None,
    )


def _api_error_code(exc: Exception) -> str:
    if isinstance(exc, exceptions.ParseError):
        return "BAD_REQUEST"
    if isinstance(exc, Http404):
        return "NOT_FOUND"
    if isinstance(exc, PermissionDenied):
        return "PERMISSION_DENIED"
    return str(getattr(exc, "default_code", "error")).upper()


def _api_error_message(data: Any) -> str:
    if isinstance(data, dict) and "detail" in data:
        return str(data["detail"])
    return str(data)
