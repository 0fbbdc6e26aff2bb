"""
school_portal.resources.fields

Reusable pydantic field types for resource payloads.

Responsibilities:
- Bounded, trimmed, non-empty text.
- Dates accepted as `DD/MM/YYYY` or ISO-8601.
- Bangladeshi mobile numbers and HTTPS-only URLs.
- Lower-cased emails and finite, non-negative amounts.
"""

from __future__ import annotations

import re
from datetime import UTC, date, datetime
from typing import Annotated, Any

from pydantic import (
    AfterValidator,
    BeforeValidator,
    EmailStr,
    Field,
    HttpUrl,
    StringConstraints,
    TypeAdapter,
    ValidationError,
)

MOBILE_PATTERN = r"^(?:\+8801|01)[3-9]\d{8}$"
_DMY = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
_http_url = TypeAdapter(HttpUrl)


def text(max_length: int | None = None) -> Any:
    return Annotated[
        str,
        StringConstraints(strip_whitespace=True, min_length=1, max_length=max_length),
    ]


def _parse_dmy(value: str) -> date | None:
    match = _DMY.match(value.strip())
    if match is None:
        return None
    day, month, year = (int(g) for g in match.groups())
    return date(year, month, day)


def _to_datetime(value: Any) -> Any:
    if isinstance(value, str):
        try:
            parsed = _parse_dmy(value)
        except ValueError as e:
            raise ValueError(f"Invalid date: {value}") from e
        if parsed is not None:
            return datetime(parsed.year, parsed.month, parsed.day)
    return value


def _naive_utc(value: datetime) -> datetime:
    # Timestamps are persisted as naive UTC.
    if value.tzinfo is not None:
        return value.astimezone(UTC).replace(tzinfo=None)
    return value


def _to_date(value: Any) -> Any:
    if isinstance(value, str):
        try:
            parsed = _parse_dmy(value)
        except ValueError as e:
            raise ValueError(f"Invalid date: {value}") from e
        if parsed is not None:
            return parsed
    return value


def _lower(value: str) -> str:
    return value.lower()


def _require_https(value: Any) -> Any:
    if not isinstance(value, str):
        return value
    try:
        url = _http_url.validate_python(value.strip())
    except ValidationError as e:
        raise ValueError("Must be a valid URL") from e
    if url.scheme != "https":
        raise ValueError("URL must use https")
    return value.strip()


DateValue = Annotated[datetime, BeforeValidator(_to_datetime), AfterValidator(_naive_utc)]
QueryDate = Annotated[date, BeforeValidator(_to_date)]
MobileNumber = Annotated[str, StringConstraints(strip_whitespace=True, pattern=MOBILE_PATTERN)]
HttpsUrl = Annotated[str, BeforeValidator(_require_https)]
# Stored lower-cased so uniqueness checks and lookups ignore case.
Email = Annotated[EmailStr, AfterValidator(_lower)]
# JSON such as `1e400` decodes to inf, which cannot be serialized back out.
Amount = Annotated[float, Field(ge=0, allow_inf_nan=False)]
