"""
MarkNotes Backend - Exception Hierarchy
=======================================

What:  Application-specific exceptions, one per error kind the API exposes.
How:   Each exception carries a client-safe message plus a context dict.
       The handlers registered in main.py map every class to an HTTP status
       and a stable machine-readable `error` kind.

Exception Hierarchy:
    MarkNotesError (base)              → 500
    ├── ValidationError                → 400 validation_error
    ├── AuthenticationError            → 401 unauthorized
    ├── NotFoundError                  → 404 not_found
    ├── ConflictError                  → 409 conflict
    ├── GrammarServiceError            → 500 grammar_service_error
    └── DatabaseError                  → 500 server_error
"""

from typing import Any, Dict, Optional


class MarkNotesError(Exception):
    """
    Base exception for all MarkNotes application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional detail; returned as `details` only by handlers
                  that opt in (validation, conflict)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MarkNotesError):
    """
    Raised when client input fails a business rule.

    Examples: empty note title, grammar text over the length limit,
    uploaded file missing or not UTF-8.
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


class AuthenticationError(MarkNotesError):
    """Missing, malformed or expired bearer token, or wrong credentials."""

    def __init__(
        self,
        message: str = "Could not validate credentials",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(MarkNotesError):
    """
    Raised when a requested resource does not exist for the caller.

    Notes owned by another user are reported the same way as missing ones,
    so the response never reveals that a foreign note exists.
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"{resource.capitalize()} not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ConflictError(MarkNotesError):
    """Raised when creating a record would violate a uniqueness rule."""

    def __init__(
        self,
        message: str = "Resource already exists",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)


class GrammarServiceError(MarkNotesError):
    """
    Raised when the external grammar service cannot be reached or answers
    with an error. The message includes the upstream reason and is returned
    to the client as-is.
    """

    def __init__(
        self,
        message: str = "Grammar check failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(MarkNotesError):
    """
    Raised when a database operation fails unexpectedly.

    The client always receives a generic message; the context (exception
    type, identifiers) is logged server-side only.
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
