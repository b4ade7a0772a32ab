"""
SalesDesk Backend — Custom Exception Hierarchy
===============================================

What:  Application-specific exceptions for every failure a client can see.
Why:   Services raise typed errors; global handlers (main.py) turn them into
       the uniform `{success: false, message, error?}` envelope with the
       right HTTP status. Routes never build error responses by hand.
Who:   Raised by the validator, the auth guard and the services.

Exception Hierarchy:
    SalesDeskError (base)
    ├── ValidationError            → 400 (single offending field)
    ├── DuplicateError             → 400 (unique constraint)
    ├── ReferentialIntegrityError  → 400 (foreign key on write or delete)
    ├── AuthenticationError        → 401 (missing token, bad credentials)
    ├── ForbiddenError             → 403 (invalid or expired token)
    ├── NotFoundError              → 404
    └── DatabaseError              → 500 (unclassified storage failure)

Storage-level failures live in `salesdesk.stores.errors`; services translate
them into the classes below.
"""

from typing import Any, Dict, Optional


class SalesDeskError(Exception):
    """
    Base exception for all SalesDesk application errors.

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


class ValidationError(SalesDeskError):
    """
    Raised when client input fails validation.

    Carries exactly one offending field: the first failing rule wins and the
    remaining rules are not reported.

    Example response:
        {
            "success": false,
            "message": "Validation error",
            "error": {"field": "gstNo", "message": "GST number must be ...", "value": "27AB"}
        }
    """

    status_code = 400

    def __init__(
        self,
        detail: str,
        field: str = "body",
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["field"] = field
        super().__init__(message="Validation error", context=ctx)
        self.detail = detail
        self.field = field
        self.value = value


class DuplicateError(SalesDeskError):
    """Raised when a write would break a uniqueness rule (GST number, HSN code, email)."""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message=message, context={"field": field} if field else None)
        self.field = field


class ReferentialIntegrityError(SalesDeskError):
    """
    Raised when a foreign key blocks a write or a delete.

    On write: `field` names the reference that points nowhere (companyId / itemId).
    On delete: the row is still referenced by sales and was left in place.
    """

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message=message, context={"field": field} if field else None)
        self.field = field


class AuthenticationError(SalesDeskError):
    """Missing credentials or failed login. HTTP 401."""

    status_code = 401

    def __init__(self, message: str = "Access token required"):
        super().__init__(message=message)


class ForbiddenError(SalesDeskError):
    """A token was presented but is invalid, tampered with, or expired. HTTP 403."""

    status_code = 403

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message=message)


class NotFoundError(SalesDeskError):
    """
    Raised when a requested resource does not exist.

    Stores return None for missing rows; services convert that into this
    exception so the handler can answer 404.
    """

    status_code = 404

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        ctx: Dict[str, Any] = {"resource": resource}
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource} not found", context=ctx)


class DatabaseError(SalesDeskError):
    """
    A storage failure the services could not classify.

    Details go to the log (context); the client only sees the generic
    500 envelope.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
