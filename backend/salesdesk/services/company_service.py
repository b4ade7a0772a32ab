"""
SalesDesk Backend — Company Service (Business Logic)
=====================================================

What:  Orchestrates company reads and writes: existence and uniqueness
       pre-checks, the store call, and translation of storage errors.
Who:   Called by the /company route handlers.

Write Flow (POST /company):
    ┌──────────┐    ┌───────────────┐    ┌──────────────┐    ┌───────────┐
    │ Validated│───▶│ GST pre-check │───▶│ company_store│───▶│ CompanyOut│
    │ payload  │    │ (friendly msg)│    │   .create    │    │           │
    └──────────┘    └───────────────┘    └──────────────┘    └───────────┘
                                                │
                          DuplicateKeyError ────┘──▶ DuplicateError (400)

    The pre-check only produces the nicer message. Two concurrent creates
    can both pass it; the uq_company_gst_no constraint rejects the loser
    and the store reports it as DuplicateKeyError.

Bulk Delete:
    Each id runs inside its own SAVEPOINT. A missing or still-referenced id
    rolls back only its savepoint and lands in failedIds; the others are
    kept. The whole request commits once at the end of the session scope.
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
from salesdesk.schemas.company import CompanyCreate, CompanyOut, CompanyUpdate
from salesdesk.stores import company_store
from salesdesk.stores.errors import DuplicateKeyError, ForeignKeyViolationError

logger = logging.getLogger(__name__)

DUPLICATE_GST_MESSAGE = "A company with this GST number already exists"
REFERENCED_MESSAGE = "Cannot delete company as it has associated records (sales, etc.)"


def _duplicate(error: DuplicateKeyError) -> DuplicateError:
    if error.field in (None, "gstNo"):
        return DuplicateError(DUPLICATE_GST_MESSAGE, field="gstNo")
    return DuplicateError(f"A company with this {error.field} already exists", field=error.field)


class CompanyService:
    """
    Business logic for companies.

    Stateless: every method receives the request's session, so one instance
    is shared by all requests.
    """

    async def create_company(self, db: AsyncSession, payload: CompanyCreate) -> CompanyOut:
        if await company_store.get_by_gst_no(db, payload.gst_no) is not None:
            raise DuplicateError(DUPLICATE_GST_MESSAGE, field="gstNo")

        try:
            company = await company_store.create(db, payload.to_record())
        except DuplicateKeyError as e:
            raise _duplicate(e) from e
        except IntegrityError as e:
            logger.error("Unclassified integrity error creating company: %s", e.orig)
            raise DatabaseError(context={"operation": "create_company"}) from e

        logger.info("Company created: %s (gst_no=%s)", company.id, company.gst_no)
        return CompanyOut.model_validate(company)

    async def list_companies(self, db: AsyncSession) -> List[CompanyOut]:
        companies = await company_store.get_all(db)
        return [CompanyOut.model_validate(c) for c in companies]

    async def get_company(self, db: AsyncSession, company_id: str) -> CompanyOut:
        company = await company_store.get_by_id(db, company_id)
        if company is None:
            raise NotFoundError(resource="Company", resource_id=company_id)
        return CompanyOut.model_validate(company)

    async def update_company(
        self,
        db: AsyncSession,
        company_id: str,
        payload: CompanyUpdate,
    ) -> Optional[CompanyOut]:
        """
        Replace a company's fields.

        Returns:
            The updated company, or None when the stored row already held
            exactly these values (nothing was written).

        Raises:
            NotFoundError:   no company with this id
            DuplicateError:  gstNo belongs to another company
        """
        existing = await company_store.get_by_id(db, company_id)
        if existing is None:
            raise NotFoundError(resource="Company", resource_id=company_id)

        if payload.gst_no != existing.gst_no:
            holder = await company_store.get_by_gst_no(db, payload.gst_no)
            if holder is not None and holder.id != company_id:
                raise DuplicateError(DUPLICATE_GST_MESSAGE, field="gstNo")

        try:
            affected = await company_store.update(db, company_id, payload.to_record())
        except DuplicateKeyError as e:
            raise _duplicate(e) from e
        except IntegrityError as e:
            logger.error("Unclassified integrity error updating company %s: %s", company_id, e.orig)
            raise DatabaseError(context={"operation": "update_company", "company_id": company_id}) from e

        if affected == 0:
            logger.info("Company %s update made no changes", company_id)
            return None

        logger.info("Company updated: %s", company_id)
        return await self.get_company(db, company_id)

    async def delete_company(self, db: AsyncSession, company_id: str) -> DeletedOut:
        if await company_store.get_by_id(db, company_id) is None:
            raise NotFoundError(resource="Company", resource_id=company_id)

        try:
            affected = await company_store.delete(db, company_id)
        except ForeignKeyViolationError as e:
            logger.info("Company %s not deleted: still referenced by sales", company_id)
            raise ReferentialIntegrityError(REFERENCED_MESSAGE, field=e.field) from e

        # Another request deleted it between the check and the delete
        if affected == 0:
            raise NotFoundError(resource="Company", resource_id=company_id)

        logger.info("Company deleted: %s", company_id)
        return DeletedOut(id=company_id, deleted_at=datetime.now(timezone.utc))

    async def bulk_delete(self, db: AsyncSession, ids: Sequence[str]) -> BulkDeleteOut:
        deleted_count = 0
        failed_ids: List[str] = []

        for company_id in ids:
            try:
                async with db.begin_nested():
                    affected = await company_store.delete(db, company_id)
            except ForeignKeyViolationError:
                failed_ids.append(company_id)
                continue

            if affected:
                deleted_count += 1
            else:
                failed_ids.append(company_id)

        logger.info(
            "Bulk company delete: %d deleted, %d failed", deleted_count, len(failed_ids)
        )
        return BulkDeleteOut(deleted_count=deleted_count, failed_ids=failed_ids)

    async def get_stats(self, db: AsyncSession) -> StatsOut:
        return StatsOut(**await company_store.get_stats(db))


# ── Singleton Instance ────────────────────────────────────────────────────
company_service = CompanyService()
