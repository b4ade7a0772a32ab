"""
SalesDesk Backend — Sales Schemas
==================================

What:  Request bodies for POST/PUT /sales and the enriched SaleOut response.

Enrichment:
    SaleOut carries companyName / companyGstNo / itemName / itemHsnCode from
    the LEFT JOIN in the sales store. They are null when the referenced row
    is missing; the sale itself is still returned.
"""

from typing import Any, ClassVar, Dict, Literal, Optional

from pydantic import Field

from salesdesk.models.sales import UNITS
from salesdesk.schemas.common import RequestSchema, TimestampedOut

Unit = Literal["pcs", "kg", "g", "ltr", "ml", "mtr", "box", "dozen", "pack", "set"]

SALES_MESSAGES: Dict[str, Dict[str, str]] = {
    "companyId": {
        "required": "Company ID is required",
        "empty": "Company ID cannot be empty",
        "max": "Company ID must not exceed 36 characters",
    },
    "itemId": {
        "required": "Item ID is required",
        "empty": "Item ID cannot be empty",
        "max": "Item ID must not exceed 36 characters",
    },
    "unit": {
        "required": "Unit is required",
        "only": f"Unit must be one of: {', '.join(UNITS)}",
    },
}


class SalesCreate(RequestSchema):
    company_id: str = Field(min_length=1, max_length=36)
    item_id: str = Field(min_length=1, max_length=36)
    unit: Unit

    messages: ClassVar[Dict[str, Dict[str, str]]] = SALES_MESSAGES


class SalesUpdate(RequestSchema):
    company_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
    item_id: Optional[str] = Field(default=None, min_length=1, max_length=36)
    unit: Optional[Unit] = None

    messages: ClassVar[Dict[str, Dict[str, str]]] = SALES_MESSAGES
    require_any: ClassVar[bool] = True

    def to_record(self) -> Dict[str, Any]:
        # Partial update: only the fields the client sent
        return self.model_dump(by_alias=False, exclude_none=True)


class SaleOut(TimestampedOut):
    company_id: str
    item_id: str
    unit: str
    company_name: Optional[str] = None
    company_gst_no: Optional[str] = None
    item_name: Optional[str] = None
    item_hsn_code: Optional[str] = None
