"""
Health Diary Client — Exception Hierarchy
==========================================

What:  Errors raised by the client layer, mirroring the API's taxonomy.
How:   HttpClient turns every non-2xx response into the ApiError subclass
       for its status; transport failures and timeouts become NetworkError.

Exception Hierarchy:
    HealthDiaryClientError (base)
    ├── ApiError                (any non-2xx; status, message, errors)
    │   ├── BadRequestError     → 400 (field errors in .errors)
    │   ├── UnauthorizedError   → 401 (session is cleared)
    │   ├── ForbiddenError      → 403
    │   ├── NotFoundError       → 404
    │   ├── ConflictError       → 409
    │   └── ServerError         → 5xx
    ├── NetworkError            (timeout, refused connection, bad JSON)
    └── RouteNotFoundError      (navigate() found no route and no wildcard)
"""

from typing import Any, Dict, List, Optional


class HealthDiaryClientError(Exception):
    """Base exception for all client-side errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


class ApiError(HealthDiaryClientError):
    """
    The API answered with an error status.

    Attributes:
        status:  HTTP status code
        message: The server's "message" field, safe to show to the user
        errors:  Field-level validation errors ([{field, message}]), if any
    """

    def __init__(
        self,
        status: int,
        message: str = "Network error",
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.status = status
        self.errors = errors or []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, message={self.message!r})"


class BadRequestError(ApiError):
    pass


class UnauthorizedError(ApiError):
    pass


class ForbiddenError(ApiError):
    pass


class NotFoundError(ApiError):
    pass


class ConflictError(ApiError):
    pass


class ServerError(ApiError):
    pass


_STATUS_ERRORS = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
}


def error_for_status(
    status: int,
    message: str,
    errors: Optional[List[Dict[str, Any]]] = None,
) -> ApiError:
    """Picks the ApiError subclass matching an HTTP status."""
    if status >= 500:
        return ServerError(status, message, errors)
    return _STATUS_ERRORS.get(status, ApiError)(status, message, errors)


class NetworkError(HealthDiaryClientError):
    """The request never produced a usable response."""

    def __init__(self, message: str = "Network error", cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class RouteNotFoundError(HealthDiaryClientError):

    def __init__(self, path: str):
        super().__init__(f"No route matches '{path}' and no wildcard route is registered")
        self.path = path
