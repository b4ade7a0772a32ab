"""
SalesDesk Backend — Company SQLAlchemy Model
=============================================

What:  ORM model for the `company` table.
Who:   Written only by `salesdesk.stores.company_store`; read by the sales
       store for join enrichment.

Table Design Rationale:
    - gst_no carries a named UNIQUE constraint (uq_company_gst_no). The
      service pre-check only improves the error message; the constraint is
      what actually prevents two companies sharing a GST number.
    - status is a plain two-value column guarded by a CHECK constraint;
      there is no lifecycle beyond the flag.
    - Rows referenced by sales cannot be deleted (RESTRICT lives on the
      sales foreign key, see models/sales.py).
"""

from typing import Optional

from sqlalchemy import CheckConstraint, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from salesdesk.database import Base
from salesdesk.models.mixins import IdentityMixin, TimestampMixin

STATUS_VALUES = ("active", "inactive")


class Company(IdentityMixin, TimestampMixin, Base):
    """A customer company identified by its GST registration."""

    __tablename__ = "company"

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    # 15-character GSTIN, pattern-checked by the request schema
    gst_no: Mapped[str] = mapped_column(String(15), nullable=False)

    email: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # Stored normalized: "+91" + 10 digits when the client sent a local number
    phone: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    address: Mapped[str] = mapped_column(Text, nullable=False)
    city: Mapped[str] = mapped_column(String(50), nullable=False)
    state: Mapped[str] = mapped_column(String(50), nullable=False)
    pincode: Mapped[str] = mapped_column(String(10), nullable=False)

    status: Mapped[str] = mapped_column(String(10), nullable=False, default="active")

    __table_args__ = (
        UniqueConstraint("gst_no", name="uq_company_gst_no"),
        CheckConstraint("status IN ('active', 'inactive')", name="ck_company_status"),
    )

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, gst_no='{self.gst_no}', status='{self.status}')>"
