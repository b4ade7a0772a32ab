"""
SalesDesk Backend — Item SQLAlchemy Model
==========================================

What:  ORM model for the `item` table (goods classified by HSN code).

Design Note:
    hsn_code is unique at the database level (uq_item_hsn_code). Two
    concurrent creates with the same code can both pass the service
    pre-check; only the constraint decides which one wins.
"""

from typing import Optional

from sqlalchemy import CheckConstraint, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from salesdesk.database import Base
from salesdesk.models.mixins import IdentityMixin, TimestampMixin


class Item(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "item"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    hsn_code: Mapped[str] = mapped_column(String(10), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="active")

    __table_args__ = (
        UniqueConstraint("hsn_code", name="uq_item_hsn_code"),
        CheckConstraint("status IN ('active', 'inactive')", name="ck_item_status"),
    )

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, hsn_code='{self.hsn_code}')>"
