"""
Exceptions shared across the habit tracker API.

``APIError`` and its subclasses carry an HTTP status, a human readable message
and a machine readable code; the handlers registered in ``main`` turn them into
``{"message": ..., "code": ...}`` responses.
"""
from typing import Any, Dict, List, Optional


class HabitTrackerException(Exception):
    """Base exception for the habit tracker application"""
    pass


class StorageError(HabitTrackerException):
    """Raised when the data store fails to execute an operation"""
    def __init__(self, operation: str, details: str):
        self.operation = operation
        self.details = details
        super().__init__(f"Storage {operation} failed: {details}")


class AuthError(HabitTrackerException):
    """Raised when a credential cannot be verified"""
    def __init__(self, message: str = "Invalid or expired token", code: str = "INVALID_TOKEN"):
        self.message = message
        self.code = code
        super().__init__(message)


class IdentityError(HabitTrackerException):
    """Raised when the identity provider rejects an account operation"""
    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code
        super().__init__(message)


class APIError(HabitTrackerException):
    """An error that maps directly onto an HTTP response"""
    def __init__(
        self,
        status_code: int,
        message: str,
        code: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        self.status_code = status_code
        self.message = message
        self.code = code
        self.errors = errors
        self.headers = headers
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"message": self.message, "code": self.code}
        if self.errors is not None:
            body["errors"] = self.errors
        return body


class NotFoundError(APIError):
    def __init__(self, message: str = "Not found", code: str = "NOT_FOUND"):
        super().__init__(404, message, code)


class ServerError(APIError):
    def __init__(self, message: str = "Internal server error", code: str = "SERVER_ERROR"):
        super().__init__(500, message, code)
