"""
Domain error taxonomy.

Services and repositories raise these; main.py turns them into JSON
responses of the form {"detail": ..., "code": ...}.
"""

from fastapi import status


class PostboardError(Exception):
    """Base class for errors that map to a stable client-facing code."""

    code = "internal_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "An internal server error occurred. Please try again later."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def headers(self) -> dict[str, str] | None:
        return None


class Unauthenticated(PostboardError):
    code = "unauthenticated"
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Authentication required"

    @property
    def headers(self) -> dict[str, str] | None:
        return {"WWW-Authenticate": "Bearer"}


class InvalidArgument(PostboardError):
    code = "invalid_argument"
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class PermissionDenied(PostboardError):
    code = "permission_denied"
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not authorized to perform this action"


class NotFound(PostboardError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class Conflict(PostboardError):
    code = "conflict"
    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"


class StorageFailure(PostboardError):
    """Backend call failed. The message never carries backend diagnostics."""

    code = "storage_failure"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "A storage error occurred. Please try again later."


class StorageTimeout(StorageFailure):
    code = "storage_timeout"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_message = "The request took too long to complete. Please try again."
