"""Global API exception handlers producing the ``code/message/details`` shape."""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Any, cast

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, OperationalError

from liquidacao_frete.domain.errors import DomainError, compose_error_message

logger = logging.getLogger(__name__)


def _error_payload(code: str, message: str, details: dict[str, Any]) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "code": code,
        "message": message,
    }
    if details:
        payload["details"] = details
    return payload


def _error_response(
    status_code: int, code: str, message: str, details: dict[str, Any]
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(code, message, details),
    )


async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
    """Rejected settlements, unknown cargos and empty undo slots."""

    logger.info(
        "domain_error",
        extra={"path": request.url.path, "code": exc.code, "details": exc.details},
    )
    return _error_response(exc.status_code, exc.code, exc.message, exc.details)


async def handle_validation_error(
    _: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed payloads (unknown percent, bad dates) map to HTTP 400."""

    errors = jsonable_encoder(exc.errors())
    return _error_response(
        HTTPStatus.BAD_REQUEST,
        "INVALID_REQUEST",
        compose_error_message(
            cause="Request payload validation failed.",
            action="Fix the invalid fields and send the request again.",
        ),
        {
            "fields": sorted(
                {".".join(str(part) for part in error["loc"][1:]) for error in errors}
            ),
            "errors": errors,
        },
    )


async def handle_integrity_error(_: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity_error", extra={"error": str(exc.orig)})
    return _error_response(
        HTTPStatus.UNPROCESSABLE_ENTITY,
        "PERSISTENCE_ERROR",
        compose_error_message(
            cause="A ledger constraint was violated while posting movements.",
            action="Review the settlement values and retry.",
        ),
        {},
    )


async def handle_operational_error(_: Request, exc: OperationalError) -> JSONResponse:
    logger.error("database_unavailable", extra={"error": str(exc.orig)})
    return _error_response(
        HTTPStatus.SERVICE_UNAVAILABLE,
        "DATABASE_UNAVAILABLE",
        compose_error_message(
            cause="The ledger database could not be reached.",
            action="Retry in a few moments; nothing was posted.",
        ),
        {},
    )


async def handle_unexpected_error(_: Request, exc: Exception) -> JSONResponse:
    logger.error("unexpected_error", exc_info=exc)
    return _error_response(
        HTTPStatus.INTERNAL_SERVER_ERROR,
        "INTERNAL_SERVER_ERROR",
        compose_error_message(
            cause="An unexpected internal error occurred.",
            action="Retry later or contact support if the error persists.",
        ),
        {"error_type": type(exc).__name__},
    )


def register_error_handlers(app: FastAPI) -> None:
    """Attach all global handlers to the FastAPI application."""

    app.add_exception_handler(DomainError, cast(Any, handle_domain_error))
    app.add_exception_handler(
        RequestValidationError, cast(Any, handle_validation_error)
    )
    app.add_exception_handler(IntegrityError, cast(Any, handle_integrity_error))
    app.add_exception_handler(OperationalError, cast(Any, handle_operational_error))
    app.add_exception_handler(Exception, handle_unexpected_error)
