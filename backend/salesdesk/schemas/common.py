"""
SalesDesk Backend — Shared Schema Building Blocks
==================================================

What:  Base classes for request/response schemas plus the response envelope.
Why:   Every resource speaks the same wire format: camelCase JSON keys,
       unknown request keys stripped, and a `{success, message?, count?,
       data?, error?}` envelope around every response.
How:   - RequestSchema: pydantic model with a camelCase alias generator,
         `extra="ignore"` (unknown fields dropped), per-field message
         tables read by `salesdesk.validation`, and a before-validator that
         handles blank optional fields and "at least one field" updates.
       - ResponseSchema: camelCase output built straight from ORM rows or
         row mappings (`from_attributes`).
       - ApiResponse[T]: the envelope. Routes serialize it with
         `response_model_exclude_unset=True`, so keys that were never set
         are omitted instead of rendered as null.

Design Decision:
    Message tables live on the schema classes (not in the validator) so a
    schema and its user-facing wording are reviewed together.
"""

from datetime import datetime
from typing import Annotated, Any, ClassVar, Dict, Generic, List, Optional, Tuple, TypeVar

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

DataT = TypeVar("DataT")

STATUS_MESSAGE = "Status must be either active or inactive"


def _check_email(value: str) -> str:
    """Reject malformed addresses but store the address exactly as sent."""
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(str(e)) from e
    return value


# Validated like EmailStr, but the domain keeps its original case
EmailAddress = Annotated[str, AfterValidator(_check_email)]


# ══════════════════════════════════════════════════════════════════════════
# Request side
# ══════════════════════════════════════════════════════════════════════════


class RequestSchema(BaseModel):
    """
    Base for every validated request body.

    Class attributes consumed by the validator:
        messages:         {fieldAlias: {rule: message}} where rule is one of
                          required, empty, min, max, pattern, only, email, type
        nullable_fields:  aliases where "" means "absent" (stored as NULL)
        require_any:      reject bodies carrying none of the known fields
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    messages: ClassVar[Dict[str, Dict[str, str]]] = {}
    nullable_fields: ClassVar[Tuple[str, ...]] = ()
    require_any: ClassVar[bool] = False

    @model_validator(mode="before")
    @classmethod
    def _prepare_body(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        if cls.require_any:
            known = set()
            for name, field in cls.model_fields.items():
                known.add(name)
                known.add(field.alias or name)
            if not known.intersection(data.keys()):
                raise PydanticCustomError(
                    "object_min",
                    "At least one field must be provided for update",
                )

        if cls.nullable_fields:
            data = {
                key: (None if key in cls.nullable_fields and value == "" else value)
                for key, value in data.items()
            }
        return data

    def to_record(self) -> Dict[str, Any]:
        """Snake_case column values for the store layer."""
        return self.model_dump(by_alias=False)


class BulkDeleteRequest(RequestSchema):
    """Body of POST /company/bulk-delete and POST /item/bulk-delete."""

    ids: List[str] = Field(min_length=1)

    messages: ClassVar[Dict[str, Dict[str, str]]] = {
        "ids": {
            "required": "Please provide an array of IDs",
            "type": "Please provide an array of IDs",
            "min": "Please provide an array of IDs",
        },
    }


# ══════════════════════════════════════════════════════════════════════════
# Response side
# ══════════════════════════════════════════════════════════════════════════


class ResponseSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class TimestampedOut(ResponseSchema):
    id: str
    created_at: datetime
    updated_at: datetime


class StatsOut(ResponseSchema):
    """Row counts by status for GET /company/stats and GET /item/stats."""

    total: int = 0
    active: int = 0
    inactive: int = 0


class DeletedOut(ResponseSchema):
    id: str
    deleted_at: datetime


class BulkDeleteOut(ResponseSchema):
    deleted_count: int
    failed_ids: List[str]


class ApiResponse(BaseModel, Generic[DataT]):
    """
    Uniform response envelope.

    Only explicitly set keys are rendered (routes use
    response_model_exclude_unset), so a list response carries `count`
    while a single-record response does not.
    """

    success: bool = True
    message: Optional[str] = None
    count: Optional[int] = None
    data: Optional[DataT] = None


def ok(**fields: Any) -> ApiResponse:
    """Successful envelope; `success` is set explicitly so it survives exclude_unset."""
    return ApiResponse(success=True, **fields)


class ErrorResponse(BaseModel):
    """Documented shape of every non-2xx response."""

    success: bool = Field(default=False)
    message: str = Field(description="Human-readable error summary")
    error: Optional[Any] = Field(
        default=None,
        description="Offending field details (validation) or error text (500, non-production)",
    )
