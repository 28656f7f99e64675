"""Error Handlers — map every failure to the marketplace error envelope.

Invariants:
    - MarketplaceError → its own http_status and to_response() body
    - 401 responses carry WWW-Authenticate: Bearer
    - RequestValidationError → 400 VALIDATION_ERROR with one detail per field
    - Anything else → 500 INTERNAL_ERROR; exception text never reaches the client
    - Nothing is retried here: the handler only reports

Design Decisions:
    - Domain handler, validation handler, catch-all, registered in that order
    - 4xx domain errors logged at WARNING (403 and ALREADY_PURCHASED are normal
      traffic), 5xx at ERROR so partial failures page someone
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from modelmart.core.errors import (
    ErrorCategory, ErrorSeverity, MarketplaceError,
)

logger = logging.getLogger(__name__)

# request sections FastAPI prefixes onto validation locations
_LOCATIONS = frozenset({"body", "query", "path", "header"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(MarketplaceError, marketplace_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)


async def marketplace_error_handler(
    request: Request, exc: MarketplaceError,
) -> JSONResponse:
    logger.log(
        logging.WARNING if exc.http_status < 500 else logging.ERROR,
        f"{exc.code} on {request.method} {request.url.path}: {exc.message}",
        extra={
            "error_code": exc.code,
            "path": request.url.path,
            "model_id": exc.context.model_id,
            "caller_id": exc.context.caller_id,
            "purchased": exc.context.purchased,
        },
    )
    headers = None
    if exc.http_status == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(
        status_code=exc.http_status, content=exc.to_response(), headers=headers,
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError,
) -> JSONResponse:
    details = [_field_detail(e) for e in exc.errors()]
    logger.warning(
        f"Rejected request body on {request.url.path}: "
        f"{', '.join(d['field'] for d in details)}",
        extra={"error_code": "VALIDATION_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_envelope(
            "VALIDATION_ERROR", "Invalid request data",
            ErrorCategory.VALIDATION, ErrorSeverity.ERROR, details=details,
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled {type(exc).__name__} on {request.method} {request.url.path}",
        exc_info=exc,
        extra={"error_code": "INTERNAL_ERROR", "path": request.url.path},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_envelope(
            "INTERNAL_ERROR", "An unexpected error occurred",
            ErrorCategory.INTERNAL, ErrorSeverity.CRITICAL,
        ),
    )


def _envelope(
    code: str, message: str, category: ErrorCategory,
    severity: ErrorSeverity, **extra: Any,
) -> dict:
    return {
        "error": {
            "code": code,
            "message": message,
            "category": category.value,
            "severity": severity.value,
            **extra,
        },
    }


def _field_detail(error: dict) -> dict:
    loc = [str(part) for part in error.get("loc", ())]
    location = loc[0] if loc and loc[0] in _LOCATIONS else None
    path = loc[1:] if location else loc
    return {
        "field": ".".join(path) or location or "",
        "location": location,
        "message": error["msg"],
        "type": error["type"],
    }
