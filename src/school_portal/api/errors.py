"""
school_portal.api.errors

Exception-to-envelope translation.

Responsibilities:
- Map domain errors, validation errors, database errors and unexpected failures to
  the standard response envelope with the right HTTP status.
- Hide error details in production.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from school_portal.api.responses import send_response
from school_portal.errors import AppError, PayloadValidationError
from school_portal.observability.logging import get_logger
from school_portal.settings import Settings

log = get_logger(__name__)


def install_exception_handlers(app: FastAPI, settings: Settings) -> None:
    def details(errors: Any) -> Any:
        if settings.env == "prod":
            return {}
        return errors

    @app.exception_handler(AppError)
    async def _app_error(request: Request, exc: AppError):
        return send_response(request, exc.status_code, exc.message, details(exc.errors))

    @app.exception_handler(RequestValidationError)
    async def _request_validation(request: Request, exc: RequestValidationError):
        # Path/query parameters declared on routes (e.g. UUID ids) land here.
        errors = [
            {
                "path": ".".join(str(p) for p in err["loc"] if p not in ("path", "query", "body")),
                "message": err["msg"],
            }
            for err in exc.errors()
        ]
        return send_response(
            request,
            status.HTTP_400_BAD_REQUEST,
            PayloadValidationError.default_message,
            details(errors),
        )

    @app.exception_handler(IntegrityError)
    async def _integrity(request: Request, exc: IntegrityError):
        log.warning("db.integrity_error", error=str(exc.orig))
        return send_response(
            request,
            status.HTTP_409_CONFLICT,
            "Entry conflicts with an existing record.",
            details({"error": str(exc.orig)}),
        )

    @app.exception_handler(OperationalError)
    async def _operational(request: Request, exc: OperationalError):
        log.error("db.unavailable", error=str(exc.orig))
        return send_response(
            request,
            status.HTTP_503_SERVICE_UNAVAILABLE,
            "Database is unavailable.",
            details({"error": str(exc.orig)}),
        )

    @app.exception_handler(SQLAlchemyError)
    async def _database(request: Request, exc: SQLAlchemyError):
        log.error("db.error", error=str(exc))
        return send_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Database error occurred.",
            details({"error": str(exc)}),
        )

    @app.exception_handler(StarletteHTTPException)
    async def _http(request: Request, exc: StarletteHTTPException):
        return send_response(request, exc.status_code, str(exc.detail), details({}))

    @app.exception_handler(Exception)
    async def _unexpected(request: Request, exc: Exception):
        log.exception("request.unhandled_error")
        return send_response(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            "Internal server error.",
            details({"error": str(exc)}),
        )


# --- Module Notes -----------------------------------------------------------
# `Exception` handlers run in Starlette's ServerErrorMiddleware, outside the
# request-logging middleware, so the failure is logged here as well.
