"""
SalesDesk Backend — Company Store
==================================

What:  Sole writer of the `company` table. Stateless module of async
       functions; every call receives the request's AsyncSession.
Who:   Called only by `salesdesk.services.company_service`.

Errors:
    create / update  → DuplicateKeyError(field="gstNo") on a taken GST number
    delete           → ForeignKeyViolationError(field="companyId") while
                       sales still reference the company
"""

from typing import Any, Dict, List, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.models.company import Company
from salesdesk.stores.base import delete_row, fetch_by_id, insert_row, status_counts, update_row


async def create(db: AsyncSession, data: Dict[str, Any]) -> Company:
    company_id = await insert_row(db, Company, data)
    return await get_by_id(db, company_id)


async def get_all(db: AsyncSession) -> List[Company]:
    stmt = (
        sa.select(Company)
        .order_by(Company.created_at.asc())
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return list(result.scalars().all())


async def get_by_id(db: AsyncSession, company_id: str) -> Optional[Company]:
    return await fetch_by_id(db, Company, company_id)


async def get_by_gst_no(db: AsyncSession, gst_no: str) -> Optional[Company]:
    result = await db.execute(sa.select(Company).where(Company.gst_no == gst_no))
    return result.scalar_one_or_none()


async def update(db: AsyncSession, company_id: str, changes: Dict[str, Any]) -> int:
    return await update_row(db, Company, company_id, changes)


async def delete(db: AsyncSession, company_id: str) -> int:
    return await delete_row(db, Company, company_id)


async def get_stats(db: AsyncSession) -> Dict[str, int]:
    return await status_counts(db, Company)
