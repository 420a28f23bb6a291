"""
Error taxonomy shared by every router.

Each error carries the HTTP status it maps to and a human-readable message.
``register_exception_handlers`` renders all of them as ``{"error": message}``.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class RecordsError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RecordsError):
    status_code = 400


class DependencyConflict(RecordsError):
    status_code = 400


class Unauthorized(RecordsError):
    status_code = 401


class InvalidCredentials(Unauthorized):
    pass


class NotFound(RecordsError):
    status_code = 404


class DuplicateName(RecordsError):
    status_code = 409


class DuplicateKey(RecordsError):
    status_code = 409


class InternalError(RecordsError):
    status_code = 500


def is_unique_violation(exc: IntegrityError) -> bool:
    # asyncpg exposes the SQLSTATE, sqlite only the message
    if getattr(exc.orig, "sqlstate", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(exc.orig)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    if getattr(exc.orig, "sqlstate", None) == "23503":
        return True
    return "FOREIGN KEY constraint failed" in str(exc.orig)


def translate_integrity_error(exc: IntegrityError, duplicate_message: str) -> RecordsError:
    """Map a failed write to the taxonomy.

    Unique-index violations are duplicates that slipped past the pre-check.
    Foreign-key violations point at a row that does not exist. NOT NULL and
    CHECK failures are invalid values.
    """
    if is_unique_violation(exc):
        return DuplicateKey(duplicate_message)
    if is_foreign_key_violation(exc):
        return ValidationError("Referenced record does not exist")
    return ValidationError("Invalid field values")


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(RecordsError)
    async def records_error_handler(request: Request, exc: RecordsError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{field}: {first.get('msg')}" if field else first.get("msg", "Invalid request")
        else:
            message = "Invalid request"
        return _error(400, message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def store_error_handler(request: Request, exc: SQLAlchemyError):
        logger.error("Store failure on %s %s", request.method, request.url.path, exc_info=exc)
        return _error(500, "Internal server error")
