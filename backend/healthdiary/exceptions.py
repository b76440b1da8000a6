"""
Health Diary Backend — Custom Exception Hierarchy
==================================================

What:  Application-specific exceptions for the different failure classes.
Why:   Services raise these without knowing about HTTP; the global handlers
       in main.py translate each class into a status code and JSON body.
How:   Each exception carries a user-facing message and an optional context
       dict that is logged but never returned to the client.

Exception Hierarchy:
    HealthDiaryError (base)
    ├── ValidationError       → 400 Bad Request (field errors, never retried)
    ├── AuthenticationError   → 401 Unauthorized (missing/expired token, bad login)
    ├── AuthorizationError    → 403 Forbidden (invalid token, not owner, not admin)
    ├── NotFoundError         → 404 Not Found
    ├── ConflictError         → 409 Conflict (duplicate username/email)
    └── DatabaseError         → 500 Internal Server Error
"""

from typing import Any, Dict, List, Optional


class HealthDiaryError(Exception):
    """
    Base exception for all Health Diary application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(HealthDiaryError):
    """
    Raised when client input fails a business-rule check.

    Field-level schema failures are reported by FastAPI's
    RequestValidationError instead; both produce the same response shape:
        {"error": "validation_error", "message": "...", "errors": [{field, message}]}
    """

    def __init__(
        self,
        message: str = "Bad Request",
        field: Optional[str] = None,
        errors: Optional[List[Dict[str, str]]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field
        self.errors = errors or ([{"field": field, "message": message}] if field else [])


class AuthenticationError(HealthDiaryError):
    """Caller is not authenticated: no token, an expired token, or bad credentials."""

    def __init__(
        self,
        message: str = "Authentication token missing. Please provide a valid token.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(HealthDiaryError):
    """Caller is authenticated (or presented a token) but may not do this."""

    def __init__(
        self,
        message: str = "Not authorized",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(HealthDiaryError):
    """
    Raised when a requested resource does not exist.

    SQLAlchemy returns None for missing rows; services convert that into
    this exception so the 404 mapping stays out of the service logic.
    The message is "<Resource> not found", e.g. "Entry not found".
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)


class ConflictError(HealthDiaryError):
    """Raised when a unique field (username, email) is already taken."""

    def __init__(
        self,
        message: str = "An account with this information already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class DatabaseError(HealthDiaryError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic. Details (SQL,
    constraint names) are logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
