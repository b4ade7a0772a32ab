"""
SalesDesk Backend — Item Schemas
=================================

Create requires name, hsnCode and status. Update requires only name;
hsnCode and status keep their stored value when omitted, while an omitted
description is cleared.
"""

from typing import Any, ClassVar, Dict, Literal, Optional, Tuple

from pydantic import Field

from salesdesk.schemas.common import STATUS_MESSAGE, RequestSchema, TimestampedOut

ITEM_MESSAGES: Dict[str, Dict[str, str]] = {
    "name": {
        "required": "Item name is required",
        "min": "Item name must be at least 2 characters long",
        "max": "Item name must not exceed 100 characters",
    },
    "description": {"max": "Description must not exceed 500 characters"},
    "hsnCode": {
        "required": "HSN code is required",
        "min": "HSN code must be at least 2 characters long",
        "max": "HSN code must not exceed 10 characters",
    },
    "status": {"only": STATUS_MESSAGE},
}


class ItemCreate(RequestSchema):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    hsn_code: str = Field(min_length=2, max_length=10)
    status: Literal["active", "inactive"]

    messages: ClassVar[Dict[str, Dict[str, str]]] = ITEM_MESSAGES
    nullable_fields: ClassVar[Tuple[str, ...]] = ("description",)


class ItemUpdate(RequestSchema):
    name: str = Field(min_length=2, max_length=100)
    description: Optional[str] = Field(default=None, max_length=500)
    hsn_code: Optional[str] = Field(default=None, min_length=2, max_length=10)
    status: Optional[Literal["active", "inactive"]] = None

    messages: ClassVar[Dict[str, Dict[str, str]]] = ITEM_MESSAGES
    nullable_fields: ClassVar[Tuple[str, ...]] = ("description",)
    require_any: ClassVar[bool] = True

    def to_record(self) -> Dict[str, Any]:
        record = {"name": self.name, "description": self.description}
        # Omitted hsnCode / status leave the stored value untouched
        if self.hsn_code is not None:
            record["hsn_code"] = self.hsn_code
        if self.status is not None:
            record["status"] = self.status
        return record


class ItemOut(TimestampedOut):
    name: str
    hsn_code: str
    description: Optional[str] = None
    status: str
