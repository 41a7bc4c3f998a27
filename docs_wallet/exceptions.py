"""
Docs Wallet Backend — Custom Exception Hierarchy
=================================================

What:  Application-specific exceptions for the error kinds the API reports.
How:   Each exception carries a user-facing message and an optional context
       dict. Global handlers (registered in main.py) map them to HTTP status
       codes and a `{"error": true, "message": ...}` body.
Who:   Raised by services, the access guard and route handlers.

Exception Hierarchy:
    DocsWalletError (base)
    ├── BadRequestError     → 400 Bad Request (missing files / fields)
    ├── UnauthorizedError   → 401 Unauthorized (missing, invalid or expired token)
    ├── NotFoundError       → 404 Not Found
    ├── ObjectStoreError    → 500 Internal Server Error (bucket upload/delete failed)
    └── DatabaseError       → 500 Internal Server Error

The `context` dict is logged server-side and never returned to the client.
"""

from typing import Any, Dict, Optional


class DocsWalletError(Exception):
    """
    Base exception for all Docs Wallet application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client)
    """

    status_code = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class BadRequestError(DocsWalletError):
    """
    Raised when the request is missing something the handler needs.

    When:    No files in an upload, no `email` in a registration or work body,
             a work whose owner does not match the caller.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Bad request",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class UnauthorizedError(DocsWalletError):
    """
    Raised by the access guard and the token service.

    Missing header, malformed token, bad signature and expiry all produce the
    same message so a client cannot tell an expired token from a forged one.
    The reason is kept in `context` for the server log.

    HTTP:    401 Unauthorized
    """

    status_code = 401

    def __init__(
        self,
        message: str = "Unauthorized access",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class NotFoundError(DocsWalletError):
    """
    Raised when a requested resource does not exist (or is not owned by the caller).

    HTTP:    404 Not Found
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        if message is None:
            message = f"{resource.capitalize()} not found."
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)


class ObjectStoreError(DocsWalletError):
    """
    Raised when the object store fails to upload or delete a file.

    When:    A boto3 call raised, or a delete did not report success.
    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "Object storage operation failed.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DatabaseError(DocsWalletError):
    """
    Raised when database operations fail unexpectedly.

    The message returned to the client is always generic; SQL, constraint
    names and driver errors go to the server log only.

    HTTP:    500 Internal Server Error
    """

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
