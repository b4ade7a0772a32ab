"""
SalesDesk Backend — Item Store
===============================

Sole writer of the `item` table. Same contract as the company store;
the unique field is hsnCode and delete is blocked while sales reference
the item (ForeignKeyViolationError, field "itemId").
"""

from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.models.item import Item
from salesdesk.stores.base import delete_row, fetch_by_id, insert_row, status_counts, update_row


async def create(db: AsyncSession, data: Dict[str, Any]) -> Item:
    item_id = await insert_row(db, Item, data)
    return await get_by_id(db, item_id)


async def get_all(db: AsyncSession) -> List[Item]:
    stmt = (
        sa.select(Item)
        .order_by(Item.created_at.asc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(db: AsyncSession, item_id: str) -> Optional[Item]:
    return await fetch_by_id(db, Item, item_id)


async def get_by_hsn_code(db: AsyncSession, hsn_code: str) -> List[Item]:
    stmt = (
        sa.select(Item)
        .where(Item.hsn_code == hsn_code)
        .order_by(Item.created_at.asc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def update(db: AsyncSession, item_id: str, changes: Dict[str, Any]) -> int:
    return await update_row(db, Item, item_id, changes)


async def delete(db: AsyncSession, item_id: str) -> int:
    return await delete_row(db, Item, item_id)


async def get_stats(db: AsyncSession) -> Dict[str, int]:
    return await status_counts(db, Item)
