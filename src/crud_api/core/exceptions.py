"""Domain exceptions shared by the guard, services and routers.

Every failure kind carries its own HTTP status and a stable ``code`` so the
exception handlers registered in the app factory can render it without
inspecting the type further.
"""

from typing import Any


class CrudApiError(Exception):
    """Base exception for the API."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result: dict[str, Any] = {"detail": self.message, "code": self.code}
        if self.details:
            result["details"] = self.details
        return result


class ValidationError(CrudApiError):
    """Raised when request input is malformed or missing."""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.errors:
            result["errors"] = self.errors
        return result


class Unauthorized(CrudApiError):
    """Raised when the API key is missing or incorrect."""

    status_code = 401
    code = "UNAUTHORIZED"


class NotFound(CrudApiError):
    """Raised when a lookup by id has no match."""

    status_code = 404
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier: Any) -> None:
        super().__init__(
            f"{resource} with id {identifier} not found",
            details={"resource": resource, "id": identifier},
        )
        self.resource = resource
        self.identifier = identifier


class PersistenceError(CrudApiError):
    """Raised when the underlying store rejects an operation."""

    status_code = 500
    code = "PERSISTENCE_ERROR"

    def __init__(self, operation: str, cause: Exception | None = None) -> None:
        super().__init__(f"Database operation failed: {operation}")
        self.operation = operation
        self.cause = cause
