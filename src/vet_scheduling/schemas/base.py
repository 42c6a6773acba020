"""
Shared Pydantic configuration for the HTTP schemas.

Clients speak camelCase JSON; Python code uses snake_case field names.
Both spellings are accepted on input, responses are emitted in camelCase.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..utils.datetime_utils import ensure_utc


class RequestSchema(BaseModel):
    """Base class for request bodies."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ResponseSchema(BaseModel):
    """Base class for response bodies built from ORM objects."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


def utc_or_none(value: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to timestamps read back without tzinfo."""
    if value is None:
        return None
    return ensure_utc(value)


def blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        return None
    return value
