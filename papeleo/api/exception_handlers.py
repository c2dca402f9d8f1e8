"""Global exception handlers that map domain exceptions to HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from papeleo.errors import (
    DUPLICATE_RESOURCE,
    EXTERNAL_SERVICE_ERROR,
    FORBIDDEN,
    NOT_FOUND,
    UNAUTHORIZED,
    VALIDATION_ERROR,
    DomainValidationError,
    DuplicateResourceError,
    ExternalServiceError,
    ForbiddenError,
    NotFoundError,
    UnauthorizedError,
)
from papeleo.schemas.error import ErrorResponse


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    """Return a standardized error response with detail and machine-readable code."""
    body = ErrorResponse(detail=detail, code=code)
    return JSONResponse(status_code=status_code, content=body.model_dump())


def domain_validation_error_handler(
    _request: Request, exc: DomainValidationError
) -> JSONResponse:
    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        str(exc),
        VALIDATION_ERROR,
    )


def duplicate_resource_error_handler(
    _request: Request, exc: DuplicateResourceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_409_CONFLICT,
        str(exc),
        DUPLICATE_RESOURCE,
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
    response = _error_response(
        status.HTTP_401_UNAUTHORIZED,
        str(exc),
        UNAUTHORIZED,
    )
    response.headers["WWW-Authenticate"] = "Bearer"
    return response


def external_service_error_handler(
    _request: Request, exc: ExternalServiceError
) -> JSONResponse:
    return _error_response(
        status.HTTP_502_BAD_GATEWAY,
        str(exc),
        EXTERNAL_SERVICE_ERROR,
    )


def register_exception_handlers(app):
    """Register domain exception handlers on the FastAPI app."""
    app.add_exception_handler(DomainValidationError, domain_validation_error_handler)
    app.add_exception_handler(DuplicateResourceError, duplicate_resource_error_handler)
    app.add_exception_handler(ExternalServiceError, external_service_error_handler)
    app.add_exception_handler(ForbiddenError, forbidden_error_handler)
    app.add_exception_handler(NotFoundError, not_found_error_handler)
    app.add_exception_handler(UnauthorizedError, unauthorized_error_handler)
