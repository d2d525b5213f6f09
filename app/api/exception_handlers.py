"""Global exception handlers that map domain exceptions to the JSON error envelope."""

from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.errors import (
    BOOTSTRAP_LOCKED,
    FORBIDDEN,
    HTTP_ERROR,
    INVALID_CREDENTIALS,
    INVALID_REFRESH,
    INVALID_RESET,
    NOT_FOUND,
    PROJECT_CODE_ERROR,
    UNAUTHORIZED,
    VALIDATION_ERROR,
    BootstrapLockedError,
    DuplicateResourceError,
    ForbiddenError,
    InvalidCredentialsError,
    InvalidRefreshError,
    InvalidResetError,
    NotFoundError,
    ProjectCodeError,
    UnauthorizedError,
)
from app.schemas.envelope import ErrorBody, ErrorResponse


def _error_response(
    status_code: int,
    message: str,
    code: str,
    details: Any = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Return a standardized error envelope with message and machine-readable code."""
    body = ErrorResponse(error=ErrorBody(code=code, message=message, details=details))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _field_errors(exc: RequestValidationError) -> dict[str, Any]:
    """Group validation messages by field, like ``{"fieldErrors": {"email": [...]}}``."""
    field_errors: dict[str, list[str]] = {}
    form_errors: list[str] = []
    for error in exc.errors():
        if error.get("type") == "json_invalid":
            form_errors.append(error.get("msg", "Invalid JSON"))
            continue
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        message = error.get("msg", "Invalid value")
        if loc:
            field_errors.setdefault(".".join(loc), []).append(message)
        else:
            form_errors.append(message)
    return {"formErrors": form_errors, "fieldErrors": field_errors}


def request_validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        "Invalid payload",
        VALIDATION_ERROR,
        details=_field_errors(exc),
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        exc.code,
    )


def bootstrap_locked_error_handler(
    _request: Request, exc: BootstrapLockedError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        BOOTSTRAP_LOCKED,
    )


def not_found_error_handler(_request: Request, exc: NotFoundError) -> JSONResponse:
    return _error_response(
        status.HTTP_404_NOT_FOUND,
        str(exc),
        NOT_FOUND,
    )


def forbidden_error_handler(_request: Request, exc: ForbiddenError) -> JSONResponse:
    return _error_response(
        status.HTTP_403_FORBIDDEN,
        str(exc),
        FORBIDDEN,
    )


def unauthorized_error_handler(_request: Request, exc: UnauthorizedError) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


def invalid_credentials_error_handler(
    _request: Request, exc: InvalidCredentialsError
) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        INVALID_CREDENTIALS,
    )


def invalid_refresh_error_handler(
    _request: Request, exc: InvalidRefreshError
) -> JSONResponse:
    return _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        INVALID_REFRESH,
    )


def invalid_reset_error_handler(_request: Request, exc: InvalidResetError) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        INVALID_RESET,
    )


def project_code_error_handler(_request: Request, exc: ProjectCodeError) -> JSONResponse:
    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        str(exc),
        PROJECT_CODE_ERROR,
    )


def http_exception_handler(
    _request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND:
        return _error_response(exc.status_code, "Route not found", NOT_FOUND)
    return _error_response(
        exc.status_code,
        str(exc.detail),
        HTTP_ERROR,
        headers=getattr(exc, "headers", None),
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(BootstrapLockedError, bootstrap_locked_error_handler)
    app.add_exception_handler(ForbiddenError, forbidden_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
    app.add_exception_handler(InvalidCredentialsError, invalid_credentials_error_handler)
    app.add_exception_handler(InvalidRefreshError, invalid_refresh_error_handler)
    app.add_exception_handler(InvalidResetError, invalid_reset_error_handler)
    app.add_exception_handler(ProjectCodeError, project_code_error_handler)
