from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    AUTH_HEADER_MISSING = "auth_header_missing"
    AUTH_IDENTITY_UNKNOWN = "auth_identity_unknown"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.AUTH_HEADER_MISSING: 400,
    ErrorKind.AUTH_IDENTITY_UNKNOWN: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.INTERNAL: 500,
}


class TaskServiceError(Exception):
    """Base for failures the HTTP boundary knows how to report."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message}


class ValidationError(TaskServiceError):
    kind = ErrorKind.VALIDATION

    def __init__(self, message: str = "Validation failed", issues: Optional[List[Dict[str, Any]]] = None):
        super().__init__(message)
        self.issues = issues

    def to_dict(self) -> Dict[str, Any]:
        body = super().to_dict()
        if self.issues is not None:
            body["issues"] = self.issues
        return body


class AuthHeaderMissing(TaskServiceError):
    kind = ErrorKind.AUTH_HEADER_MISSING


class AuthIdentityUnknown(TaskServiceError):
    kind = ErrorKind.AUTH_IDENTITY_UNKNOWN


class NotFound(TaskServiceError):
    kind = ErrorKind.NOT_FOUND


class Forbidden(TaskServiceError):
    kind = ErrorKind.FORBIDDEN
