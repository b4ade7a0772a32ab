"""
SalesDesk Backend — Sales SQLAlchemy Model
===========================================

What:  ORM model for the `sales` table: one row links a company, an item
       and the unit of measure the item was sold in.

Foreign Keys:
    fk_sales_company_id → company.id   ON DELETE RESTRICT
    fk_sales_item_id    → item.id      ON DELETE RESTRICT

    RESTRICT (not CASCADE): deleting a company or item that still has
    sales must fail, not silently remove the sales history. The constraint
    names are what the storage adapter maps back to the API fields
    `companyId` / `itemId` when a write or delete is rejected.
"""

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from salesdesk.database import Base
from salesdesk.models.mixins import IdentityMixin, TimestampMixin

# Fixed unit-of-measure tokens accepted on a sale
UNITS = ("pcs", "kg", "g", "ltr", "ml", "mtr", "box", "dozen", "pack", "set")


class Sales(IdentityMixin, TimestampMixin, Base):
    __tablename__ = "sales"

    company_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("company.id", name="fk_sales_company_id", ondelete="RESTRICT"),
        nullable=False,
    )
    item_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("item.id", name="fk_sales_item_id", ondelete="RESTRICT"),
        nullable=False,
    )
    unit: Mapped[str] = mapped_column(String(10), nullable=False)

    # FK columns are not indexed automatically on PostgreSQL; the RESTRICT
    # check on company/item delete scans sales by these columns.
    __table_args__ = (
        Index("idx_sales_company_id", "company_id"),
        Index("idx_sales_item_id", "item_id"),
    )

    def __repr__(self) -> str:
        return f"<Sales(id={self.id}, company_id={self.company_id}, item_id={self.item_id})>"
