"""Custom domain exceptions for the application."""

# Stable, machine-readable error codes for API consumers.
NOT_FOUND = "NOT_FOUND"
DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
VALIDATION_ERROR = "VALIDATION_ERROR"
FORBIDDEN = "FORBIDDEN"
UNAUTHORIZED = "UNAUTHORIZED"
EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"


class DomainError(Exception):
    """Base exception for domain/business logic errors."""

    pass


class NotFoundError(DomainError):
    """Raised when a requested resource does not exist (or is soft-deleted)."""

    pass


class DuplicateResourceError(DomainError):
    """Raised when an operation would repeat a one-time transition or violate a uniqueness rule."""

    pass


class DomainValidationError(DomainError):
    """Raised when business rules or input validation fail (e.g. invalid dates, oversized files)."""

    pass


class ForbiddenError(DomainError):
    """Raised when the current user may not act on the requested resource."""

    pass


class UnauthorizedError(DomainError):
    """Raised when the request carries no valid credentials."""

    pass


class ExternalServiceError(DomainError):
    """Raised when an outbound call (storage, background check, AI, email, Docs API) fails."""

    pass


class StorageError(ExternalServiceError):
    """Raised when the object storage rejects an upload, signing or removal."""

    pass
