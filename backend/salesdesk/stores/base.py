"""
Statement helpers shared by the resource stores.

Every statement is a SQLAlchemy construct with bound parameters. Writes go
through Core-style UPDATE/DELETE with synchronize_session=False, so reads
use populate_existing to refresh any instance already in the session.
"""

from typing import Any, Dict, Optional, Type, TypeVar
from uuid import uuid4

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.database import Base
from salesdesk.stores.errors import integrity_errors

ModelT = TypeVar("ModelT", bound=Base)


def new_id() -> str:
    return str(uuid4())


async def insert_row(db: AsyncSession, model: Type[ModelT], data: Dict[str, Any]) -> str:
    """INSERT one row with a fresh UUID4 id and return the id."""
    row_id = new_id()
    with integrity_errors():
        await db.execute(sa.insert(model).values(id=row_id, **data))
    return row_id


async def fetch_by_id(db: AsyncSession, model: Type[ModelT], row_id: str) -> Optional[ModelT]:
    stmt = (
        sa.select(model)
        .where(model.id == row_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def update_row(
    db: AsyncSession,
    model: Type[ModelT],
    row_id: str,
    changes: Dict[str, Any],
) -> int:
    """
    UPDATE the row only if at least one value actually differs.

    Returns the affected row count: 0 when the row is missing or when every
    submitted value equals the stored one.
    """
    if not changes:
        return 0
    columns = model.__table__.c
    differs = sa.or_(*(columns[key].is_distinct_from(value) for key, value in changes.items()))
    stmt = (
        sa.update(model)
        .where(model.id == row_id, differs)
        .values(**changes)
        .execution_options(synchronize_session=False)
    )
    with integrity_errors():
        result = await db.execute(stmt)
    return result.rowcount


async def delete_row(db: AsyncSession, model: Type[ModelT], row_id: str) -> int:
    stmt = (
        sa.delete(model)
        .where(model.id == row_id)
        .execution_options(synchronize_session=False)
    )
    with integrity_errors():
        result = await db.execute(stmt)
    return result.rowcount


async def status_counts(db: AsyncSession, model: Type[ModelT]) -> Dict[str, int]:
    """Row totals by status in a single aggregate query."""
    stmt = sa.select(
        sa.func.count(model.id),
        sa.func.coalesce(sa.func.sum(sa.case((model.status == "active", 1), else_=0)), 0),
        sa.func.coalesce(sa.func.sum(sa.case((model.status == "inactive", 1), else_=0)), 0),
    )
    total, active, inactive = (await db.execute(stmt)).one()
    return {"total": int(total), "active": int(active), "inactive": int(inactive)}
