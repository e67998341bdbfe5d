"""
RecipeBox Backend: Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for every error the API can report.
How:   Each exception carries a human-readable message and a context dict.
       Global exception handlers (registered in main.py) render them as
       `{"error": message, **context}` with the matching HTTP status code.
Who:   Raised by services, the authorization dependency and startup code.

Exception Hierarchy:
    RecipeBoxError (base)
    ├── ValidationError          → 400 Bad Request (missing/malformed input)
    ├── ConflictError            → 400 Bad Request (duplicate username/email)
    ├── AuthenticationError      → 401 Unauthorized
    ├── AuthorizationError       → 403 Forbidden
    ├── NotFoundError            → 404 Not Found
    ├── ServerError              → 500 Internal Server Error
    │   └── DatabaseError        → 500 Internal Server Error
    ├── ConfigurationError       → startup failure (never reaches a client)
    └── SeedError                → logged at startup (never reaches a client)

Context rules:
    For 4xx errors the context IS part of the response body (for example the
    `required` field list or the `recipe_owner` id), so it must only hold
    values that are safe to show the caller. For 5xx errors the context is
    logged server-side only and the client receives a generic body.
"""

from typing import Any, Dict, Iterable, Optional


class RecipeBoxError(Exception):
    """
    Base exception for all RecipeBox application errors.

    Attributes:
        message:      Value of the `error` key in the response body
        context:      Extra response keys (4xx) or log-only detail (5xx)
        status_code:  HTTP status the global handler responds with
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

    def to_body(self) -> Dict[str, Any]:
        """Render the structured `{error, ...context}` response body."""
        return {"error": self.message, **self.context}


class ValidationError(RecipeBoxError):
    """
    Raised when client input is missing or malformed.

    HTTP: 400 Bad Request

    Example response:
        {
            "error": "Missing required fields",
            "required": ["title", "ingredients", ...],
            "missing": ["title"]
        }
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)

    @classmethod
    def missing_fields(
        cls, required: Iterable[str], missing: Optional[Iterable[str]] = None
    ) -> "ValidationError":
        """Build the standard "Missing required fields" error."""
        context: Dict[str, Any] = {"required": list(required)}
        if missing is not None:
            context["missing"] = list(missing)
        return cls(message="Missing required fields", context=context)


class ConflictError(RecipeBoxError):
    """
    Raised when a unique value (username, email) is already taken.

    HTTP: 400 Bad Request
    """

    status_code = 400

    def __init__(self, message: str, context: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, context=context)


class AuthenticationError(RecipeBoxError):
    """
    Raised when the caller could not be identified.

    When:  Wrong email/password at login, or no bearer token on a
           protected route.
    HTTP:  401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Authentication required",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class AuthorizationError(RecipeBoxError):
    """
    Raised when the caller is identified but not allowed to act.

    When:  Invalid/expired bearer token, or a non-owner tries to modify a
           recipe (context then echoes the owner and the requester).
    HTTP:  403 Forbidden
    """

    status_code = 403

    def __init__(
        self,
        message: str = "Forbidden",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(RecipeBoxError):
    """
    Raised when a requested resource does not exist.

    HTTP: 404 Not Found

    The id is echoed back in the body: {"error": "Recipe not found", "id": 42}
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "Resource",
        resource_id: Optional[Any] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if resource_id is not None:
            ctx["id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class ServerError(RecipeBoxError):
    """
    Raised when an operation fails for reasons the client cannot fix.

    HTTP: 500 Internal Server Error

    The response body is always generic; `message` and `context` are logged.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Internal server error",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(ServerError):
    """
    Raised when a database query, insert, update or delete fails.

    Services wrap SQLAlchemy exceptions in this type so the SQL text and
    constraint names stay in the server log.
    """

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(RecipeBoxError):
    """Raised at startup when a required setting (JWT_SECRET) is missing."""

    def __init__(
        self,
        message: str = "Invalid configuration",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class SeedError(RecipeBoxError):
    """Raised when inserting the sample data at startup fails."""

    def __init__(
        self,
        message: str = "Seeding sample data failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
