"""
SalesDesk Backend — Sales Service
==================================

What:  Business logic for sales records.
Why:   A sale is only valid while both its company and its item exist.

Reference Checks:
    create/update first look the referenced company and item up, so the
    400 names the missing field (companyId or itemId) on every backend.
    The fk_sales_* constraints still guard the race where a company or
    item disappears between the check and the insert; the store reports
    that as ForeignKeyViolationError.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from salesdesk.exceptions import DatabaseError, NotFoundError, ReferentialIntegrityError
from salesdesk.schemas.sales import SaleOut, SalesCreate, SalesUpdate
from salesdesk.schemas.common import DeletedOut
from salesdesk.stores import company_store, item_store, sales_store
from salesdesk.stores.errors import ForeignKeyViolationError

logger = logging.getLogger(__name__)

MISSING_REFERENCE_MESSAGES = {
    "companyId": "Company not found with the provided ID",
    "itemId": "Item not found with the provided ID",
}


def _missing_reference(field: Optional[str]) -> ReferentialIntegrityError:
    message = MISSING_REFERENCE_MESSAGES.get(field, "Referenced record not found")
    return ReferentialIntegrityError(message, field=field)


class SalesService:
    async def _check_references(self, db: AsyncSession, changes: Dict[str, Any]) -> None:
        company_id = changes.get("company_id")
        if company_id is not None and await company_store.get_by_id(db, company_id) is None:
            raise _missing_reference("companyId")

        item_id = changes.get("item_id")
        if item_id is not None and await item_store.get_by_id(db, item_id) is None:
            raise _missing_reference("itemId")

    async def create_sale(self, db: AsyncSession, payload: SalesCreate) -> SaleOut:
        record = payload.to_record()
        await self._check_references(db, record)

        try:
            sale = await sales_store.create(db, record)
        except ForeignKeyViolationError as e:
            raise _missing_reference(e.field) from e
        except IntegrityError as e:
            logger.error("Unclassified integrity error creating sale: %s", e.orig)
            raise DatabaseError(context={"operation": "create_sale"}) from e

        logger.info("Sale created: %s (company=%s, item=%s)", sale["id"], sale["company_id"], sale["item_id"])
        return SaleOut.model_validate(sale)

    async def list_sales(self, db: AsyncSession) -> List[SaleOut]:
        return [SaleOut.model_validate(row) for row in await sales_store.get_all(db)]

    async def get_sale(self, db: AsyncSession, sale_id: str) -> SaleOut:
        sale = await sales_store.get_by_id(db, sale_id)
        if sale is None:
            raise NotFoundError(resource="Sale", resource_id=sale_id)
        return SaleOut.model_validate(sale)

    async def update_sale(
        self, db: AsyncSession, sale_id: str, payload: SalesUpdate
    ) -> Optional[SaleOut]:
        """Partial update. Returns None when nothing changed."""
        if await sales_store.get_by_id(db, sale_id) is None:
            raise NotFoundError(resource="Sale", resource_id=sale_id)

        changes = payload.to_record()
        await self._check_references(db, changes)

        try:
            affected = await sales_store.update(db, sale_id, changes)
        except ForeignKeyViolationError as e:
            raise _missing_reference(e.field) from e
        except IntegrityError as e:
            logger.error("Unclassified integrity error updating sale %s: %s", sale_id, e.orig)
            raise DatabaseError(context={"operation": "update_sale", "sale_id": sale_id}) from e

        if affected == 0:
            return None
        logger.info("Sale updated: %s", sale_id)
        return await self.get_sale(db, sale_id)

    async def delete_sale(self, db: AsyncSession, sale_id: str) -> DeletedOut:
        if await sales_store.get_by_id(db, sale_id) is None:
            raise NotFoundError(resource="Sale", resource_id=sale_id)

        if await sales_store.delete(db, sale_id) == 0:
            raise NotFoundError(resource="Sale", resource_id=sale_id)

        logger.info("Sale deleted: %s", sale_id)
        return DeletedOut(id=sale_id, deleted_at=datetime.now(timezone.utc))


sales_service = SalesService()
