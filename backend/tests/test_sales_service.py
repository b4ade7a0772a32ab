"""
SalesDesk Backend — Sales Service Unit Tests
=============================================

What we test:
    ✅ Missing company / item → ReferentialIntegrityError naming the field
    ✅ Foreign key race reported the same way
    ✅ Partial update only checks references it changes
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest

from salesdesk.exceptions import NotFoundError, ReferentialIntegrityError
from salesdesk.schemas.sales import SalesCreate, SalesUpdate
from salesdesk.services.sales_service import SalesService
from salesdesk.stores.errors import ForeignKeyViolationError

NOW = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)


def make_sale(**overrides):
    row = {
        "id": "sale-1",
        "company_id": "company-1",
        "item_id": "item-1",
        "unit": "kg",
        "created_at": NOW,
        "updated_at": NOW,
        "company_name": "Acme Traders",
        "company_gst_no": "27ABCDE1234F1Z5",
        "item_name": "Steel Bolt",
        "item_hsn_code": "7318",
    }
    row.update(overrides)
    return row


SALE_BODY = {"companyId": "company-1", "itemId": "item-1", "unit": "kg"}


class TestSalesService:

    def setup_method(self):
        self.service = SalesService()

    @pytest.mark.asyncio
    async def test_create_success(self, mock_db_session):
        with patch('salesdesk.services.sales_service.company_store') as mock_companies, \
             patch('salesdesk.services.sales_service.item_store') as mock_items, \
             patch('salesdesk.services.sales_service.sales_store') as mock_sales:

            mock_companies.get_by_id = AsyncMock(return_value=SimpleNamespace(id="company-1"))
            mock_items.get_by_id = AsyncMock(return_value=SimpleNamespace(id="item-1"))
            mock_sales.create = AsyncMock(return_value=make_sale())

            result = await self.service.create_sale(
                mock_db_session, SalesCreate.model_validate(SALE_BODY)
            )

            assert result.id == "sale-1"
            assert result.company_name == "Acme Traders"
            assert result.item_hsn_code == "7318"

    @pytest.mark.asyncio
    async def test_create_with_unknown_company(self, mock_db_session):
        with patch('salesdesk.services.sales_service.company_store') as mock_companies, \
             patch('salesdesk.services.sales_service.item_store') as mock_items, \
             patch('salesdesk.services.sales_service.sales_store') as mock_sales:

            mock_companies.get_by_id = AsyncMock(return_value=None)
            mock_items.get_by_id = AsyncMock()
            mock_sales.create = AsyncMock()

            with pytest.raises(ReferentialIntegrityError) as exc_info:
                await self.service.create_sale(
                    mock_db_session, SalesCreate.model_validate(SALE_BODY)
                )

            assert exc_info.value.field == "companyId"
            assert exc_info.value.message == "Company not found with the provided ID"
            mock_sales.create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_create_with_unknown_item(self, mock_db_session):
        with patch('salesdesk.services.sales_service.company_store') as mock_companies, \
             patch('salesdesk.services.sales_service.item_store') as mock_items:

            mock_companies.get_by_id = AsyncMock(return_value=SimpleNamespace(id="company-1"))
            mock_items.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(ReferentialIntegrityError) as exc_info:
                await self.service.create_sale(
                    mock_db_session, SalesCreate.model_validate(SALE_BODY)
                )
            assert exc_info.value.field == "itemId"

    @pytest.mark.asyncio
    async def test_create_foreign_key_race(self, mock_db_session):
        """The item vanishes between the check and the insert."""
        with patch('salesdesk.services.sales_service.company_store') as mock_companies, \
             patch('salesdesk.services.sales_service.item_store') as mock_items, \
             patch('salesdesk.services.sales_service.sales_store') as mock_sales:

            mock_companies.get_by_id = AsyncMock(return_value=SimpleNamespace(id="company-1"))
            mock_items.get_by_id = AsyncMock(return_value=SimpleNamespace(id="item-1"))
            mock_sales.create = AsyncMock(side_effect=ForeignKeyViolationError("fk", field="itemId"))

            with pytest.raises(ReferentialIntegrityError) as exc_info:
                await self.service.create_sale(
                    mock_db_session, SalesCreate.model_validate(SALE_BODY)
                )
            assert exc_info.value.message == "Item not found with the provided ID"

    @pytest.mark.asyncio
    async def test_partial_update_checks_only_changed_references(self, mock_db_session):
        with patch('salesdesk.services.sales_service.company_store') as mock_companies, \
             patch('salesdesk.services.sales_service.item_store') as mock_items, \
             patch('salesdesk.services.sales_service.sales_store') as mock_sales:

            mock_companies.get_by_id = AsyncMock()
            mock_items.get_by_id = AsyncMock()
            mock_sales.get_by_id = AsyncMock(side_effect=[make_sale(), make_sale(unit="box")])
            mock_sales.update = AsyncMock(return_value=1)

            result = await self.service.update_sale(
                mock_db_session, "sale-1", SalesUpdate.model_validate({"unit": "box"})
            )

            assert result.unit == "box"
            assert mock_sales.update.await_args.args[2] == {"unit": "box"}
            mock_companies.get_by_id.assert_not_awaited()
            mock_items.get_by_id.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_update_without_changes_returns_none(self, mock_db_session):
        with patch('salesdesk.services.sales_service.sales_store') as mock_sales:
            mock_sales.get_by_id = AsyncMock(return_value=make_sale())
            mock_sales.update = AsyncMock(return_value=0)

            result = await self.service.update_sale(
                mock_db_session, "sale-1", SalesUpdate.model_validate({"unit": "kg"})
            )
            assert result is None

    @pytest.mark.asyncio
    async def test_delete_missing_sale(self, mock_db_session):
        with patch('salesdesk.services.sales_service.sales_store') as mock_sales:
            mock_sales.get_by_id = AsyncMock(return_value=None)

            with pytest.raises(NotFoundError) as exc_info:
                await self.service.delete_sale(mock_db_session, "nope")
            assert exc_info.value.message == "Sale not found"
