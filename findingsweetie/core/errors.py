"""Domain errors raised by the service layer.

Routers translate these into HTTP responses with :func:`http_error`; the
migration sequencer's error is fatal and is never caught by the application.
"""

from fastapi import HTTPException, status


class RegistryError(Exception):
    """Base class for registry errors."""


class ValidationFailure(RegistryError, ValueError):
    """Caller-supplied data violates a constraint."""


class NotFoundError(RegistryError, LookupError):
    """No matching row."""


class OwnershipError(NotFoundError):
    """Row exists but belongs to another user."""


class ConstraintViolation(RegistryError):
    """A uniqueness or integrity constraint would be broken."""


class AuthenticationError(RegistryError):
    """Credentials supplied with a request do not match."""


class SchemaMigrationError(RegistryError, RuntimeError):
    """The pets schema could not be brought to the current shape."""


def http_error(exc: RegistryError) -> HTTPException:
    """Map a service error onto the HTTP status the API reports for it."""
    if isinstance(exc, AuthenticationError):
        code = status.HTTP_401_UNAUTHORIZED
    elif isinstance(exc, OwnershipError):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, ConstraintViolation):
        code = status.HTTP_409_CONFLICT
    elif isinstance(exc, ValidationFailure):
        code = status.HTTP_400_BAD_REQUEST
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(exc))
