"""
SalesDesk Backend — Company Service Unit Tests
===============================================

What:  Tests for CompanyService business logic.
How:   company_store is patched with AsyncMocks; no database involved.

What we test:
    ✅ GST pre-check and store-level duplicate both map to DuplicateError
    ✅ Update returning 0 rows means "no changes"
    ✅ Delete of a referenced company → ReferentialIntegrityError
    ✅ Bulk delete isolates failures per id
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError

from salesdesk.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    ReferentialIntegrityError,
)
from salesdesk.schemas.company import CompanyCreate, CompanyUpdate
from salesdesk.services.company_service import CompanyService
from salesdesk.stores.errors import DuplicateKeyError, ForeignKeyViolationError


def make_company(**overrides):
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    fields = {
        "id": "company-1",
        "name": "Acme Traders",
        "gst_no": "27ABCDE1234F1Z5",
        "email": "accounts@acme.in",
        "phone": "+919876543210",
        "address": "12 Market Road",
        "city": "Pune",
        "state": "Maharashtra",
        "pincode": "411001",
        "status": "active",
        "created_at": now,
        "updated_at": now,
    }
    fields.update(overrides)
    return SimpleNamespace(**fields)


class TestCompanyServiceCreate:

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_create_success(self, mock_db_session, company_payload):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_gst_no = AsyncMock(return_value=None)
            mock_store.create = AsyncMock(return_value=make_company())

            result = await self.service.create_company(
                mock_db_session, CompanyCreate.model_validate(company_payload)
            )

            assert result.id == "company-1"
            assert result.gst_no == "27ABCDE1234F1Z5"
            record = mock_store.create.await_args.args[1]
            assert record["phone"] == "+919876543210"

    @pytest.mark.asyncio
    async def test_create_duplicate_gst_precheck(self, mock_db_session, company_payload):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_gst_no = AsyncMock(return_value=make_company())
            mock_store.create = AsyncMock()

            with pytest.raises(DuplicateError) as exc_info:
                await self.service.create_company(
                    mock_db_session, CompanyCreate.model_validate(company_payload)
                )

            assert exc_info.value.message == "A company with this GST number already exists"
            assert exc_info.value.field == "gstNo"
            mock_store.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_duplicate_from_constraint(self, mock_db_session, company_payload):
        """A concurrent insert that slips past the pre-check still gets the GST message."""
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_gst_no = AsyncMock(return_value=None)
            mock_store.create = AsyncMock(side_effect=DuplicateKeyError("dup", field="gstNo"))

            with pytest.raises(DuplicateError) as exc_info:
                await self.service.create_company(
                    mock_db_session, CompanyCreate.model_validate(company_payload)
                )
            assert exc_info.value.field == "gstNo"

    @pytest.mark.asyncio
    async def test_create_unclassified_integrity_error(self, mock_db_session, company_payload):
        """A constraint the store cannot name surfaces as a generic DatabaseError."""
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_gst_no = AsyncMock(return_value=None)
            mock_store.create = AsyncMock(
                side_effect=IntegrityError("INSERT", {}, Exception("CHECK constraint failed"))
            )

            with pytest.raises(DatabaseError) as exc_info:
                await self.service.create_company(
                    mock_db_session, CompanyCreate.model_validate(company_payload)
                )
            assert exc_info.value.status_code == 500
            assert exc_info.value.context == {"operation": "create_company"}


class TestCompanyServiceUpdate:

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_update_not_found(self, mock_db_session, company_payload):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await self.service.update_company(
                    mock_db_session, "missing", CompanyUpdate.model_validate(company_payload)
                )
            assert exc_info.value.message == "Company not found"

    @pytest.mark.asyncio
    async def test_update_without_changes_returns_none(self, mock_db_session, company_payload):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_id = AsyncMock(return_value=make_company())
            mock_store.update = AsyncMock(return_value=0)

            result = await self.service.update_company(
                mock_db_session, "company-1", CompanyUpdate.model_validate(company_payload)
            )
            assert result is None

    @pytest.mark.asyncio
    async def test_update_to_gst_of_other_company(self, mock_db_session, company_payload):
        company_payload["gstNo"] = "29ABCDE1234F1Z5"
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_id = AsyncMock(return_value=make_company())
            mock_store.get_by_gst_no = AsyncMock(
                return_value=make_company(id="company-2", gst_no="29ABCDE1234F1Z5")
            )
            mock_store.update = AsyncMock()

            with pytest.raises(DuplicateError):
                await self.service.update_company(
                    mock_db_session, "company-1", CompanyUpdate.model_validate(company_payload)
                )
            mock_store.update.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_returns_fresh_row(self, mock_db_session, company_payload):
        company_payload["city"] = "Mumbai"
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_id = AsyncMock(
                side_effect=[make_company(), make_company(city="Mumbai")]
            )
            mock_store.update = AsyncMock(return_value=1)

            result = await self.service.update_company(
                mock_db_session, "company-1", CompanyUpdate.model_validate(company_payload)
            )
            assert result.city == "Mumbai"


class TestCompanyServiceDelete:

    def setup_method(self):
        self.service = CompanyService()

    @pytest.mark.asyncio
    async def test_delete_referenced_company(self, mock_db_session):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_id = AsyncMock(return_value=make_company())
            mock_store.delete = AsyncMock(side_effect=ForeignKeyViolationError("fk"))

            with pytest.raises(ReferentialIntegrityError) as exc_info:
                await self.service.delete_company(mock_db_session, "company-1")
            assert exc_info.value.message == (
                "Cannot delete company as it has associated records (sales, etc.)"
            )

    @pytest.mark.asyncio
    async def test_delete_success(self, mock_db_session):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_by_id = AsyncMock(return_value=make_company())
            mock_store.delete = AsyncMock(return_value=1)

            result = await self.service.delete_company(mock_db_session, "company-1")
            assert result.id == "company-1"
            assert result.deleted_at is not None

    @pytest.mark.asyncio
    async def test_bulk_delete_reports_failures(self, mock_db_session):
        async def fake_delete(db, company_id):
            if company_id == "referenced":
                raise ForeignKeyViolationError("fk")
            return 0 if company_id == "missing" else 1

        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.delete = AsyncMock(side_effect=fake_delete)

            result = await self.service.bulk_delete(
                mock_db_session, ["a", "missing", "referenced", "c"]
            )

            assert result.deleted_count == 2
            assert result.failed_ids == ["missing", "referenced"]
            assert mock_db_session.begin_nested.call_count == 4

    @pytest.mark.asyncio
    async def test_stats(self, mock_db_session):
        with patch('salesdesk.services.company_service.company_store') as mock_store:
            mock_store.get_stats = AsyncMock(return_value={"total": 3, "active": 2, "inactive": 1})

            result = await self.service.get_stats(mock_db_session)
            assert (result.total, result.active, result.inactive) == (3, 2, 1)
