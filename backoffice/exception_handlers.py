"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert the domain error taxonomy into RFC 7807 responses
  - Log every handled error with its error_id for correlation
  - Answer internal failures with a generic body that leaks no detail

Collaborators:
  - main.py: registers these handlers
  - exceptions.py: BackofficeError hierarchy
  - api/error_responses.py: AppHTTPException and problem+json rendering

Constraints:
  - AlreadyExists 409, NotExist 404, AuthorizationDenied 403,
    Authentication 401, PreconditionViolation 500, Database 503
  - Messages of PreconditionViolation and DatabaseError stay in the logs

Notes:
  - Starlette resolves handlers by walking the exception MRO, so the
    resource-specific subclasses fall through to their kind handler
"""

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.error_responses import (
    AppHTTPException,
    app_exception_handler,
    conflict,
    database_error,
    forbidden,
    internal_error,
    not_found,
    unauthorized,
    validation_error,
)
from .exceptions import (
    AlreadyExistsError,
    AuthenticationError,
    AuthorizationDeniedError,
    BackofficeError,
    DatabaseError,
    NotExistError,
    PreconditionViolationError,
)
from .logger import logger


def _log(level: str, label: str, exc: BackofficeError) -> None:
    getattr(logger, level)(
        label,
        extra={
            "error_id": exc.error_id,
            "error_code": exc.error_code,
            "error_message": exc.message,
        },
    )


async def already_exists_handler(request: Request, exc: AlreadyExistsError) -> JSONResponse:
    _log("info", "Conflict", exc)
    return await app_exception_handler(request, conflict(exc.message, exc.error_id))


async def not_exist_handler(request: Request, exc: NotExistError) -> JSONResponse:
    _log("info", "Not found", exc)
    return await app_exception_handler(request, not_found(exc.message, exc.error_id))


async def authorization_denied_handler(
    request: Request, exc: AuthorizationDeniedError
) -> JSONResponse:
    _log("warning", "Authorization denied", exc)
    return await app_exception_handler(request, forbidden(exc.message))


async def authentication_error_handler(
    request: Request, exc: AuthenticationError
) -> JSONResponse:
    # R: One public message for every authentication failure (no user enumeration)
    _log("warning", "Authentication failed", exc)
    return await app_exception_handler(
        request, unauthorized("Invalid credentials")
    )


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    _log("error", "Database error", exc)
    return await app_exception_handler(request, database_error(exc.error_id))


async def precondition_violation_handler(
    request: Request, exc: PreconditionViolationError
) -> JSONResponse:
    logger.error(
        "Precondition violated",
        exc_info=exc,
        extra={"error_id": exc.error_id, "error_message": exc.message},
    )
    return await app_exception_handler(request, internal_error(exc.error_id))


async def backoffice_error_handler(request: Request, exc: BackofficeError) -> JSONResponse:
    _log("error", "Unhandled back-office error", exc)
    return await app_exception_handler(request, internal_error(exc.error_id))


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg"), "type": err.get("type")}
        for err in exc.errors()
    ]
    return await app_exception_handler(
        request, validation_error("Request validation failed", errors)
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception", exc_info=exc)
    return await app_exception_handler(request, internal_error())


def register_exception_handlers(app) -> None:
    """
    Register all exception handlers on the FastAPI app.

    Usage:
        from .exception_handlers import register_exception_handlers
        register_exception_handlers(app)
    """
    app.add_exception_handler(AlreadyExistsError, already_exists_handler)
    app.add_exception_handler(NotExistError, not_exist_handler)
    app.add_exception_handler(AuthorizationDeniedError, authorization_denied_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(PreconditionViolationError, precondition_violation_handler)
    app.add_exception_handler(BackofficeError, backoffice_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
