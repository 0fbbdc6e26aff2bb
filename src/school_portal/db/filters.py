"""
school_portal.db.filters

Search-criteria to SQL translation for list endpoints.

Responsibilities:
- Turn a validated query-string mapping into SQLAlchemy WHERE clauses.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Any

from sqlalchemy import ColumnElement


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def prepare_search_filters(model: type, criteria: dict[str, Any]) -> list[ColumnElement[bool]]:
    """
    Rules, applied per key:
    - falsy values (None, "", [], False, 0) are ignored
    - lists become `IN (...)`
    - `id` always matches exactly
    - a plain date on a timestamp column matches the whole day
    - other strings match as substrings
    - anything else matches exactly
    """

    clauses: list[ColumnElement[bool]] = []
    for key, value in criteria.items():
        if not value:
            continue
        column = getattr(model, key)
        if isinstance(value, (list, tuple, set)):
            clauses.append(column.in_(list(value)))
        elif key == "id":
            clauses.append(column == value)
        elif isinstance(value, date) and not isinstance(value, datetime):
            start, end = _day_bounds(value)
            clauses.append(column.between(start, end))
        elif isinstance(value, str):
            clauses.append(column.contains(value))
        else:
            clauses.append(column == value)
    return clauses
