"""
SalesDesk Backend — Company Schemas
====================================

What:  Request bodies for POST/PUT /company and the CompanyOut response.

Validation Rules (checked in declaration order, first failure wins):
    name      required, 2..100 chars
    gstNo     required, GSTIN format (e.g. 27ABCDE1234F1Z5)
    email     optional, valid address, ≤100 chars
    phone     optional, 10 digits or "+CC" + 10 digits; 10-digit numbers
              are stored as "+91XXXXXXXXXX"
    address   required, ≤500 chars
    city      required, 2..50 chars
    state     required, 2..50 chars
    pincode   required, 6-digit Indian postal code (no leading zero)
    status    required, active | inactive

Update Semantics:
    PUT is a full replacement: the same fields are required as on create,
    and an omitted email/phone is written as NULL.
"""

from typing import ClassVar, Dict, Literal, Optional, Tuple

from pydantic import Field, field_validator
from pydantic_core import PydanticCustomError

from salesdesk.schemas.common import (
    STATUS_MESSAGE,
    EmailAddress,
    RequestSchema,
    TimestampedOut,
)

GST_PATTERN = r"^[0-9]{2}[A-Z]{5}[0-9]{4}[A-Z]{1}[1-9A-Z]{1}Z[0-9A-Z]{1}$"
PHONE_PATTERN = r"^(\+\d{2}[0-9]{10}|[0-9]{10})$"
PINCODE_PATTERN = r"^[1-9][0-9]{5}$"
EMAIL_MAX_LENGTH = 100

COMPANY_MESSAGES: Dict[str, Dict[str, str]] = {
    "name": {
        "required": "Company name is required",
        "min": "Company name must be at least 2 characters long",
        "max": "Company name must not exceed 100 characters",
    },
    "gstNo": {"pattern": "GST number must be in valid format (e.g., 27ABCDE1234F1Z5)"},
    "email": {
        "email": "Please provide a valid email address",
        "max": "Email must not exceed 100 characters",
    },
    "phone": {
        "pattern": "Please provide a valid phone number",
        "max": "Please provide a valid phone number",
    },
    "address": {"max": "Address must not exceed 500 characters"},
    "city": {
        "min": "City must be at least 2 characters long",
        "max": "City must not exceed 50 characters",
    },
    "state": {
        "min": "State must be at least 2 characters long",
        "max": "State must not exceed 50 characters",
    },
    "pincode": {"pattern": "Pincode must be a valid 6-digit Indian postal code"},
    "status": {"only": STATUS_MESSAGE},
}


class CompanyCreate(RequestSchema):
    name: str = Field(min_length=2, max_length=100)
    gst_no: str = Field(pattern=GST_PATTERN)
    email: Optional[EmailAddress] = None
    phone: Optional[str] = Field(default=None, max_length=13, pattern=PHONE_PATTERN)
    address: str = Field(min_length=1, max_length=500)
    city: str = Field(min_length=2, max_length=50)
    state: str = Field(min_length=2, max_length=50)
    pincode: str = Field(pattern=PINCODE_PATTERN)
    status: Literal["active", "inactive"]

    messages: ClassVar[Dict[str, Dict[str, str]]] = COMPANY_MESSAGES
    nullable_fields: ClassVar[Tuple[str, ...]] = ("email", "phone")

    @field_validator("email")
    @classmethod
    def limit_email_length(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError(
                "string_too_long",
                "String should have at most {max_length} characters",
                {"max_length": EMAIL_MAX_LENGTH},
            )
        return v

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: Optional[str]) -> Optional[str]:
        # Local 10-digit numbers get the Indian country code
        if v is not None and len(v) == 10:
            return f"+91{v}"
        return v


class CompanyUpdate(CompanyCreate):
    require_any: ClassVar[bool] = True


class CompanyOut(TimestampedOut):
    name: str
    gst_no: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: str
    city: str
    state: str
    pincode: str
    status: str

