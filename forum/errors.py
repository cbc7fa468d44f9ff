"""
Error taxonomy shared by the repository, service and handler layers.

Every failure the service layer raises on purpose is a ``ServiceError``
carrying a closed ``ErrorKind`` discriminant.  Handlers never inspect the
concrete class: ``forum.handlers`` maps ``exc.kind`` to a status code
through a single lookup table.

    ServiceError (base)
    ├── ValidationError        → validation_error  (400)
    ├── NotFoundError          → not_found         (404)
    ├── AlreadyInUseError      → already_in_use    (409)
    ├── UnauthenticatedError   → unauthenticated   (401)
    ├── UnauthorizedError      → unauthorized      (403)
    └── PersistenceError       → internal_error    (500)
        └── DuplicateRecordError

``message`` is safe to return to API consumers; ``context`` holds extra
detail that is logged and, for client-class errors only, echoed back.
"""
from enum import Enum
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    ALREADY_IN_USE = "already_in_use"
    UNAUTHENTICATED = "unauthenticated"
    UNAUTHORIZED = "unauthorized"
    INTERNAL = "internal_error"


class ServiceError(Exception):
    """Base class for every error the service layer raises deliberately."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Client-supplied data breaks a domain rule (length, missing reference...)."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class NotFoundError(ServiceError):
    """The referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, resource: str = "resource", resource_id: Any = None):
        message = f"{resource} not found"
        if resource_id is not None:
            message = f"{resource} with ID {resource_id} not found"
        ctx: Dict[str, Any] = {"resource": resource}
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class AlreadyInUseError(ServiceError):
    """A unique field (username, topic name) collided with an existing row."""

    kind = ErrorKind.ALREADY_IN_USE

    def __init__(self, field: str):
        super().__init__(message=f"{field} already in use", context={"field": field})
        self.field = field


class UnauthenticatedError(ServiceError):
    """No usable credentials: missing header, bad token, unknown user."""

    kind = ErrorKind.UNAUTHENTICATED

    def __init__(self, message: str = "unauthenticated"):
        super().__init__(message=message)


class UnauthorizedError(ServiceError):
    """The authenticated identity may not act on this resource."""

    kind = ErrorKind.UNAUTHORIZED

    def __init__(self, message: str = "unauthorized"):
        super().__init__(message=message)


class PersistenceError(ServiceError):
    """
    Wraps a storage-layer failure.

    The original exception is kept as ``__cause__`` for logging; the
    message returned to clients is always generic.
    """

    kind = ErrorKind.INTERNAL

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DuplicateRecordError(PersistenceError):
    """A write hit a unique or foreign-key constraint."""
