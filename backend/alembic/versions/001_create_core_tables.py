"""Create company, item, sales and users tables

Revision ID: 001
Revises: None
Create Date: 2025-01-10 00:00:00.000000+00:00

What:  Initial SalesDesk schema.
How:   Named constraints throughout; the storage layer maps these names
       back to API field names when a write is rejected:
           uq_company_gst_no    → gstNo
           uq_item_hsn_code     → hsnCode
           uq_users_email       → email
           fk_sales_company_id  → companyId  (ON DELETE RESTRICT)
           fk_sales_item_id     → itemId     (ON DELETE RESTRICT)

Rollback: downgrade() drops all four tables (destructive).
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("CURRENT_TIMESTAMP"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    op.create_table(
        "company",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("gst_no", sa.String(15), nullable=False),
        sa.Column("email", sa.String(100), nullable=True),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column("city", sa.String(50), nullable=False),
        sa.Column("state", sa.String(50), nullable=False),
        sa.Column("pincode", sa.String(10), nullable=False),
        sa.Column("status", sa.String(10), nullable=False, server_default=sa.text("'active'")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_company"),
        sa.UniqueConstraint("gst_no", name="uq_company_gst_no"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="ck_company_status"),
    )

    op.create_table(
        "item",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("hsn_code", sa.String(10), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(10), nullable=False, server_default=sa.text("'active'")),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_item"),
        sa.UniqueConstraint("hsn_code", name="uq_item_hsn_code"),
        sa.CheckConstraint("status IN ('active', 'inactive')", name="ck_item_status"),
    )

    op.create_table(
        "sales",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("company_id", sa.String(36), nullable=False),
        sa.Column("item_id", sa.String(36), nullable=False),
        sa.Column("unit", sa.String(10), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_sales"),
        sa.ForeignKeyConstraint(
            ["company_id"], ["company.id"], name="fk_sales_company_id", ondelete="RESTRICT"
        ),
        sa.ForeignKeyConstraint(
            ["item_id"], ["item.id"], name="fk_sales_item_id", ondelete="RESTRICT"
        ),
    )
    # The RESTRICT check on company/item delete scans sales by these columns
    op.create_index("idx_sales_company_id", "sales", ["company_id"])
    op.create_index("idx_sales_item_id", "sales", ["item_id"])

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_users"),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )


def downgrade() -> None:
    op.drop_table("users")
    op.drop_index("idx_sales_item_id", table_name="sales")
    op.drop_index("idx_sales_company_id", table_name="sales")
    op.drop_table("sales")
    op.drop_table("item")
    op.drop_table("company")
