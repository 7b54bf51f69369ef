"""
PerkBoard Backend - Custom Exception Hierarchy
================================================

What:  Defines application-specific exceptions for different error scenarios.
Why:   Custom exceptions enable targeted error handling with appropriate HTTP
       status codes and user-friendly messages.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and dependencies; caught by global handlers.

Exception Hierarchy:
    PerkBoardError (base)
    ├── ValidationError          → 400 Bad Request (client can fix)
    ├── AuthenticationError      → 401 Unauthorized (sign in first)
    ├── PermissionDeniedError    → 403 Forbidden (signed in, not allowed)
    ├── NotFoundError            → 404 Not Found
    ├── InputReadError           → 500 Internal Server Error
    ├── DatabaseError            → 500 Internal Server Error
    └── RateLimitExceededError   → 429 Too Many Requests

Malformed perk-definition text is NOT an error: the parser degrades to
fewer records instead of raising.
"""

from typing import Any, Dict, Optional


class PerkBoardError(Exception):
    """
    Base exception for all PerkBoard application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  unless the handler opts in)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(PerkBoardError):
    """
    Raised when client input fails a business rule.

    When:    Following yourself, unknown identity provider, empty perk list.
    HTTP:    400 Bad Request

    Schema-level problems (missing body fields, wrong types) are still
    reported by FastAPI as 422.
    """

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


class AuthenticationError(PerkBoardError):
    """
    Raised when a route needs a signed-in user and the session has none.

    HTTP:    401 Unauthorized
    """

    def __init__(
        self,
        message: str = "You must be signed in to do that",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class PermissionDeniedError(PerkBoardError):
    """
    Raised when the signed-in user lacks the role a route requires.

    When:    Non-admin calls GET /api/perkDefs or POST /api/updatePerks.
    HTTP:    403 Forbidden
    """

    def __init__(
        self,
        message: str = "You do not have permission to do that",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(PerkBoardError):
    """
    Raised when a requested resource does not exist.

    When:    GET /api/posts/{id} or /api/users/{id} with an unknown UUID,
             saving a post that was deleted.
    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class InputReadError(PerkBoardError):
    """
    Raised when an input source cannot be read as text.

    What:    The perk-definition asset is missing, unreadable, or not valid text.
    HTTP:    500 Internal Server Error

    Recovery:
        None inside the backend. The caller decides whether to retry the
        whole operation; the file path is logged, never returned.
    """

    def __init__(
        self,
        message: str = "Could not read the requested input",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(PerkBoardError):
    """
    Raised when database operations fail unexpectedly.

    HTTP:    500 Internal Server Error

    The message returned to the client is always generic. Detailed error
    info is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class RateLimitExceededError(PerkBoardError):
    """
    Raised when a client exceeds the per-IP request rate limit.

    HTTP:    429 Too Many Requests
    """

    def __init__(
        self,
        retry_after: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            f"Rate limit exceeded. Please wait {retry_after} seconds before making more requests."
        )
        ctx = context or {}
        ctx["retry_after"] = retry_after
        super().__init__(message=message, context=ctx)
        self.retry_after = retry_after
