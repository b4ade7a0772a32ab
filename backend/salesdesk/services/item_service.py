"""
SalesDesk Backend — Item Service
=================================

What:  Business logic for items. Mirrors the company service; the unique
       key is the HSN code, which is also enforced by uq_item_hsn_code.

Update Semantics:
    name is required and replaced, description is replaced (cleared when
    omitted), hsnCode and status are only changed when sent.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ReferentialIntegrityError,
)
from salesdesk.schemas.common import BulkDeleteOut, DeletedOut, StatsOut
from salesdesk.schemas.item import ItemCreate, ItemOut, ItemUpdate
from salesdesk.stores import item_store
from salesdesk.stores.errors import DuplicateKeyError, ForeignKeyViolationError

logger = logging.getLogger(__name__)

DUPLICATE_HSN_MESSAGE = "An item with this HSN code already exists"
REFERENCED_MESSAGE = "Cannot delete item as it has associated records (sales, orders, etc.)"


class ItemService:
    async def _ensure_hsn_free(
        self, db: AsyncSession, hsn_code: str, exclude_id: Optional[str] = None
    ) -> None:
        holders = await item_store.get_by_hsn_code(db, hsn_code)
        if any(item.id != exclude_id for item in holders):
            raise DuplicateError(DUPLICATE_HSN_MESSAGE, field="hsnCode")

    async def create_item(self, db: AsyncSession, payload: ItemCreate) -> ItemOut:
        await self._ensure_hsn_free(db, payload.hsn_code)
        try:
            item = await item_store.create(db, payload.to_record())
        except DuplicateKeyError as e:
            raise DuplicateError(DUPLICATE_HSN_MESSAGE, field="hsnCode") from e
        except IntegrityError as e:
            logger.error("Unclassified integrity error creating item: %s", e.orig)
            raise DatabaseError(context={"operation": "create_item"}) from e

        logger.info("Item created: %s (hsn_code=%s)", item.id, item.hsn_code)
        return ItemOut.model_validate(item)

    async def list_items(self, db: AsyncSession) -> List[ItemOut]:
        return [ItemOut.model_validate(i) for i in await item_store.get_all(db)]

    async def get_item(self, db: AsyncSession, item_id: str) -> ItemOut:
        item = await item_store.get_by_id(db, item_id)
        if item is None:
            raise NotFoundError(resource="Item", resource_id=item_id)
        return ItemOut.model_validate(item)

    async def get_items_by_hsn_code(self, db: AsyncSession, hsn_code: str) -> List[ItemOut]:
        return [ItemOut.model_validate(i) for i in await item_store.get_by_hsn_code(db, hsn_code)]

    async def update_item(
        self, db: AsyncSession, item_id: str, payload: ItemUpdate
    ) -> Optional[ItemOut]:
        """Returns None when nothing changed."""
        existing = await item_store.get_by_id(db, item_id)
        if existing is None:
            raise NotFoundError(resource="Item", resource_id=item_id)

        changes = payload.to_record()
        if "hsn_code" in changes and changes["hsn_code"] != existing.hsn_code:
            await self._ensure_hsn_free(db, changes["hsn_code"], exclude_id=item_id)

        try:
            affected = await item_store.update(db, item_id, changes)
        except DuplicateKeyError as e:
            raise DuplicateError(DUPLICATE_HSN_MESSAGE, field="hsnCode") from e
        except IntegrityError as e:
            logger.error("Unclassified integrity error updating item %s: %s", item_id, e.orig)
            raise DatabaseError(context={"operation": "update_item", "item_id": item_id}) from e

        if affected == 0:
            return None
        logger.info("Item updated: %s", item_id)
        return await self.get_item(db, item_id)

    async def delete_item(self, db: AsyncSession, item_id: str) -> DeletedOut:
        if await item_store.get_by_id(db, item_id) is None:
            raise NotFoundError(resource="Item", resource_id=item_id)

        try:
            affected = await item_store.delete(db, item_id)
        except ForeignKeyViolationError as e:
            logger.info("Item %s not deleted: still referenced by sales", item_id)
            raise ReferentialIntegrityError(REFERENCED_MESSAGE, field=e.field) from e

        if affected == 0:
            raise NotFoundError(resource="Item", resource_id=item_id)

        logger.info("Item deleted: %s", item_id)
        return DeletedOut(id=item_id, deleted_at=datetime.now(timezone.utc))

    async def bulk_delete(self, db: AsyncSession, ids: Sequence[str]) -> BulkDeleteOut:
        deleted_count = 0
        failed_ids: List[str] = []

        for item_id in ids:
            try:
                async with db.begin_nested():
                    affected = await item_store.delete(db, item_id)
            except ForeignKeyViolationError:
                failed_ids.append(item_id)
                continue
            if affected:
                deleted_count += 1
            else:
                failed_ids.append(item_id)

        logger.info("Bulk item delete: %d deleted, %d failed", deleted_count, len(failed_ids))
        return BulkDeleteOut(deleted_count=deleted_count, failed_ids=failed_ids)

    async def get_stats(self, db: AsyncSession) -> StatsOut:
        return StatsOut(**await item_store.get_stats(db))


item_service = ItemService()
