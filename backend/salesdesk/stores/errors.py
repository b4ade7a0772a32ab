"""
SalesDesk Backend — Typed Storage Errors
=========================================

What:  Classifies driver IntegrityErrors into DuplicateKeyError and
       ForeignKeyViolationError, each naming the API field involved.
Why:   Services decide status codes and messages; they should never parse
       driver error strings. All driver-specific knowledge stays here.
How:   1. SQLSTATE from the DBAPI error (asyncpg exposes `sqlstate`,
          psycopg exposes `pgcode`): 23505 unique, 23503 foreign key.
       2. sqlite3's extended error name (SQLITE_CONSTRAINT_UNIQUE, ...).
       3. Fallback: keywords in the error text.
       The field comes from the constraint name, or from the
       `table.column` token SQLite puts in its message.

Unclassified IntegrityErrors propagate unchanged and end up as a 500.
"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"

# Constraint names and table.column tokens → API field names
_FIELD_TOKENS = (
    ("uq_company_gst_no", "gstNo"),
    ("company.gst_no", "gstNo"),
    ("uq_item_hsn_code", "hsnCode"),
    ("item.hsn_code", "hsnCode"),
    ("uq_users_email", "email"),
    ("users.email", "email"),
    ("fk_sales_company_id", "companyId"),
    ("sales.company_id", "companyId"),
    ("fk_sales_item_id", "itemId"),
    ("sales.item_id", "itemId"),
)


class StoreError(Exception):
    """Base class for classified storage failures."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class DuplicateKeyError(StoreError):
    """A unique constraint rejected the write."""


class ForeignKeyViolationError(StoreError):
    """
    A foreign key rejected the write (reference points nowhere) or the
    delete (row is still referenced).
    """


def _driver_error(exc: IntegrityError):
    orig = exc.orig
    cause = getattr(orig, "__cause__", None)
    return orig, cause


def _sqlstate(exc: IntegrityError) -> Optional[str]:
    for source in _driver_error(exc):
        for attr in ("sqlstate", "pgcode"):
            code = getattr(source, attr, None)
            if code:
                return str(code)
    return None


def _resolve_field(exc: IntegrityError) -> Optional[str]:
    parts = []
    for source in _driver_error(exc):
        if source is None:
            continue
        constraint = getattr(source, "constraint_name", None)
        if constraint:
            parts.append(str(constraint))
        parts.append(str(source))
    text = " ".join(parts).lower()
    for token, field in _FIELD_TOKENS:
        if token in text:
            return field
    return None


def classify_integrity_error(exc: IntegrityError) -> Optional[StoreError]:
    """Map an IntegrityError to a typed StoreError, or None if unrecognized."""
    code = _sqlstate(exc)
    error_name = str(getattr(exc.orig, "sqlite_errorname", "") or "")
    text = str(exc.orig).lower()
    field = _resolve_field(exc)

    if code == UNIQUE_VIOLATION or error_name in (
        "SQLITE_CONSTRAINT_UNIQUE",
        "SQLITE_CONSTRAINT_PRIMARYKEY",
    ):
        return DuplicateKeyError("Unique constraint violated", field=field)
    if code == FOREIGN_KEY_VIOLATION or error_name == "SQLITE_CONSTRAINT_FOREIGNKEY":
        return ForeignKeyViolationError("Foreign key constraint violated", field=field)

    if code is None:
        if "unique" in text or "duplicate" in text:
            return DuplicateKeyError("Unique constraint violated", field=field)
        if "foreign key" in text:
            return ForeignKeyViolationError("Foreign key constraint violated", field=field)
    return None


@contextmanager
def integrity_errors() -> Iterator[None]:
    """
    Wrap a write statement so IntegrityErrors surface as StoreErrors.

    Usage:
        with integrity_errors():
            await db.execute(insert(Company).values(...))
    """
    try:
        yield
    except IntegrityError as e:
        classified = classify_integrity_error(e)
        if classified is None:
            raise
        raise classified from e
