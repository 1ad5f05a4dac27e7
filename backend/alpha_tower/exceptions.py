"""
Alpha Tower Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions, each carrying its HTTP status code.
How:   Raised where a problem is detected (services, handlers, repositories).
       A single handler registered in main.py turns any of them into
       `{"status": "error", "message": ...}` with `status_code`.

Exception Hierarchy:
    AlphaTowerError (base)
    ├── BadRequestError      → 400 Bad Request
    ├── UnauthorizedError    → 401 Unauthorized
    ├── NotFoundError        → 404 Not Found
    ├── ConflictError        → 409 Conflict
    ├── FileStorageError     → 500 Internal Server Error
    └── DatabaseError        → 500 Internal Server Error
"""

from typing import Any, Dict, Optional


class AlphaTowerError(Exception):
    """
    Base exception for all Alpha Tower application errors.

    Attributes:
        message:     User-facing error description (safe to return in API response)
        status_code: HTTP status the error translates to
        context:     Additional debug info (logged but NOT returned to client)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(AlphaTowerError):
    """
    Raised when client input is unusable: failed schema validation, a
    missing upload, a rejected file type.
    """

    status_code = 400

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


class UnauthorizedError(AlphaTowerError):
    """Missing or invalid credentials (JWT or email/password)."""

    status_code = 401


class NotFoundError(AlphaTowerError):
    """
    Raised when a referenced entity id is absent.

    Repositories return None for missing records; the service layer turns
    that None into this exception.
    """

    status_code = 404

    def __init__(
        self,
        message: str = "The requested resource was not found",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(AlphaTowerError):
    """
    Uniqueness violation: product name or user email already in use.

    Raised by services on the check-then-act path and by the SQLAlchemy
    repositories when the database unique constraint fires.
    """

    status_code = 409


class FileStorageError(AlphaTowerError):
    """Could not write, read or delete an uploaded file."""

    status_code = 500

    def __init__(
        self,
        message: str = "File storage operation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(AlphaTowerError):
    """
    A database operation failed unexpectedly.

    The message returned to the client is always generic; the detail is
    logged server-side only.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
