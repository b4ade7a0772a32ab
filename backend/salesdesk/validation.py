"""
SalesDesk Backend — Request Body Validation
============================================

What:  Turns a raw JSON body into a sanitized schema instance, or raises a
       ValidationError naming exactly one offending field.
Why:   Clients get one actionable message per request ("GST number must be
       in valid format ...") instead of pydantic's full error list.
How:   validate_payload() runs pydantic, keeps only the first error, and
       rewrites its message from the schema's `messages` table.
       validated_body() wraps that in a FastAPI dependency so routes declare
       `payload: CompanyCreate = Depends(validated_body(CompanyCreate))`.
Who:   Every route that accepts a JSON body; the RequestValidationError
       handler in main.py reuses describe_error().

Rule Names:
    pydantic error type          → rule key in Schema.messages
    missing                      → required
    string_too_short on ""       → empty
    value_error on ""            → empty
    string_too_short / too_short → min
    string_too_long / too_long   → max
    string_pattern_mismatch      → pattern
    literal_error                → only
    value_error (email address)  → email
    string_type / list_type      → type
"""

import json
import logging
from typing import Any, Callable, Dict, Optional, Type, TypeVar

from fastapi import Request
from pydantic import ValidationError as PydanticValidationError

from salesdesk.exceptions import ValidationError
from salesdesk.schemas.common import RequestSchema

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=RequestSchema)

_RULES = {
    "missing": "required",
    "string_too_short": "min",
    "too_short": "min",
    "string_too_long": "max",
    "too_long": "max",
    "string_pattern_mismatch": "pattern",
    "literal_error": "only",
    "value_error": "email",
    "string_type": "type",
    "list_type": "type",
}

_DEFAULT_MESSAGES = {
    "required": '"{field}" is required',
    "empty": '"{field}" is not allowed to be empty',
    "min": '"{field}" length must be at least {min_length} characters long',
    "max": '"{field}" length must be less than or equal to {max_length} characters long',
    "pattern": '"{field}" fails to match the required pattern',
    "type": '"{field}" has an invalid type',
}


def describe_error(
    error: Dict[str, Any],
    messages: Optional[Dict[str, Dict[str, str]]] = None,
    loc_offset: int = 0,
) -> Dict[str, Any]:
    """
    Convert one pydantic error dict into `{field, message, value}`.

    loc_offset drops leading location parts (FastAPI prefixes body errors
    with "body").
    """
    loc = tuple(error.get("loc") or ())[loc_offset:]
    field = ".".join(str(part) for part in loc) if loc else "body"
    error_type = error.get("type", "")
    value = None if error_type == "missing" else error.get("input")

    rule = _RULES.get(error_type)
    if rule in ("min", "email") and value == "":
        rule = "empty"

    field_messages = (messages or {}).get(field, {}) if len(loc) == 1 else {}
    template = None
    if rule:
        template = field_messages.get(rule) or _DEFAULT_MESSAGES.get(rule)

    if template is None:
        message = error.get("msg", "Invalid value")
    else:
        try:
            message = template.format(field=field, **(error.get("ctx") or {}))
        except (KeyError, IndexError):
            message = error.get("msg", template)

    return {"field": field, "message": message, "value": value}


def validate_payload(schema: Type[SchemaT], payload: Any) -> SchemaT:
    """Validate `payload` against `schema`; first failing rule wins."""
    try:
        return schema.model_validate(payload)
    except PydanticValidationError as e:
        first = describe_error(e.errors()[0], schema.messages)
        logger.debug(
            "Validation failed for %s: field=%s rule=%s",
            schema.__name__, first["field"], e.errors()[0].get("type"),
        )
        raise ValidationError(
            detail=first["message"],
            field=first["field"],
            value=first["value"],
        )


def validated_body(schema: Type[SchemaT]) -> Callable[[Request], Any]:
    """
    FastAPI dependency factory: parse the JSON body and validate it.

    A body that is not JSON at all fails on field "body".
    """

    async def dependency(request: Request) -> SchemaT:
        raw = await request.body()
        try:
            payload = json.loads(raw) if raw else {}
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise ValidationError(
                detail="Request body must be valid JSON",
                field="body",
            )
        return validate_payload(schema, payload)

    dependency.__name__ = f"validate_{schema.__name__}"
    return dependency
