"""
school_portal.resources.selection

Projection of ORM rows into API payloads.

Responsibilities:
- Keep only the fields enabled in a resource's selection criteria.
- Rename attributes to their camelCase API names.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic.alias_generators import to_camel


def select_fields(record: Any, criteria: Mapping[str, bool]) -> dict[str, Any]:
    return {
        to_camel(name): getattr(record, name)
        for name, included in criteria.items()
        if included
    }


def select_many(records: list[Any], criteria: Mapping[str, bool]) -> list[dict[str, Any]]:
    return [select_fields(r, criteria) for r in records]
