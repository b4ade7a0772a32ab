"""
SalesDesk Backend — Sales Store
================================

What:  Sole writer of the `sales` table; reads are enriched with the
       company and item the sale points at.

Read Query:
    SELECT sales.*, company.name, company.gst_no, item.name, item.hsn_code
    FROM sales
    LEFT OUTER JOIN company ON company.id = sales.company_id
    LEFT OUTER JOIN item    ON item.id    = sales.item_id

    LEFT (not INNER) so a sale is still returned when a counterpart row is
    absent; the enrichment columns are then NULL.

Rows come back as plain dicts keyed by the SaleOut attribute names, ready for
SaleOut.model_validate().
"""

from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.models.company import Company
from salesdesk.models.item import Item
from salesdesk.models.sales import Sales
from salesdesk.stores.base import delete_row, insert_row, update_row


def _enriched_select() -> sa.Select:
    return (
        sa.select(
            Sales.id,
            Sales.company_id,
            Sales.item_id,
            Sales.unit,
            Sales.created_at,
            Sales.updated_at,
            Company.name.label("company_name"),
            Company.gst_no.label("company_gst_no"),
            Item.name.label("item_name"),
            Item.hsn_code.label("item_hsn_code"),
        )
        .select_from(Sales)
        .outerjoin(Company, Company.id == Sales.company_id)
        .outerjoin(Item, Item.id == Sales.item_id)
    )


async def create(db: AsyncSession, data: Dict[str, Any]) -> Dict[str, Any]:
    sale_id = await insert_row(db, Sales, data)
    return await get_by_id(db, sale_id)


async def get_all(db: AsyncSession) -> List[Dict[str, Any]]:
    result = await db.execute(_enriched_select().order_by(Sales.created_at.asc()))
    return [dict(row) for row in result.mappings()]


async def get_by_id(db: AsyncSession, sale_id: str) -> Optional[Dict[str, Any]]:
    result = await db.execute(_enriched_select().where(Sales.id == sale_id))
    row = result.mappings().one_or_none()
    return dict(row) if row is not None else None


async def update(db: AsyncSession, sale_id: str, changes: Dict[str, Any]) -> int:
    return await update_row(db, Sales, sale_id, changes)


async def delete(db: AsyncSession, sale_id: str) -> int:
    return await delete_row(db, Sales, sale_id)
