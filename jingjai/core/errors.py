"""
Error Taxonomy Module

Every failure surfaced to a caller carries a machine-readable ``kind``, a
human-readable message and, for input problems, a field-name -> message map
that forms can use to highlight specific inputs.
"""
from typing import Dict, Optional


class ServiceError(Exception):
    """Base class for errors that are safe to show to the caller."""
    kind = "internal"
    status_code = 500

    def __init__(self, message: str, field_errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.message = message
        self.field_errors = dict(field_errors or {})

    def to_dict(self) -> dict:
        body = {"kind": self.kind, "message": self.message}
        if self.field_errors:
            body["fieldErrors"] = self.field_errors
        return body


class UnauthenticatedError(ServiceError):
    kind = "unauthenticated"
    status_code = 401


class InvalidArgumentError(ServiceError):
    kind = "invalid-argument"
    status_code = 400


class FailedPreconditionError(ServiceError):
    kind = "failed-precondition"
    status_code = 400


class PermissionDeniedError(ServiceError):
    kind = "permission-denied"
    status_code = 403


class AlreadyExistsError(ServiceError):
    kind = "already-exists"
    status_code = 409


class NotFoundError(ServiceError):
    kind = "not-found"
    status_code = 404


class InternalError(ServiceError):
    kind = "internal"
    status_code = 500

    def __init__(self, message: str = "Internal error."):
        super().__init__(message)
