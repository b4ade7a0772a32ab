"""
SalesDesk Backend — User Store
===============================

Sole reader and writer of `users.password_hash`. find_by_email and
find_by_id return the full ORM row (hash included) for the credential
checks in user_service; the response schemas drop the hash.
"""

from typing import Any, Dict, Optional

import sqlalchemy as sa
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.models.user import User
from salesdesk.stores.base import delete_row, fetch_by_id, insert_row, update_row


async def create(db: AsyncSession, data: Dict[str, Any]) -> User:
    """data must already carry `password_hash`; plain passwords never reach the store."""
    user_id = await insert_row(db, User, data)
    return await find_by_id(db, user_id)


async def find_by_email(db: AsyncSession, email: str) -> Optional[User]:
    stmt = (
        sa.select(User)
        .where(User.email == email)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def find_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    return await fetch_by_id(db, User, user_id)


async def update(db: AsyncSession, user_id: str, changes: Dict[str, Any]) -> int:
    return await update_row(db, User, user_id, changes)


async def update_password(db: AsyncSession, user_id: str, password_hash: str) -> int:
    return await update_row(db, User, user_id, {"password_hash": password_hash})


async def delete(db: AsyncSession, user_id: str) -> int:
    return await delete_row(db, User, user_id)
