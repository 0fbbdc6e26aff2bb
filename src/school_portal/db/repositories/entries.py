"""
school_portal.db.repositories.entries

Generic repository shared by every content resource.

Responsibilities:
- List, count and fetch entries of one model (optionally scoped by category).
- Detect unique-value collisions before writes.
- Create, update and delete entries.
"""

from __future__ import annotations

import uuid
from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, and_, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.db.models import EntryMixin


class EntryRepo:
    def __init__(self, session: AsyncSession, model: type[EntryMixin]) -> None:
        self._session = session
        self._model = model

    def _scoped(self, clauses: Sequence[ColumnElement[bool]], category: str | None):
        where = list(clauses)
        if category is not None:
            where.append(self._model.category == category)  # type: ignore[attr-defined]
        return where

    async def find_many(
        self,
        *,
        filters: Sequence[ColumnElement[bool]] = (),
        category: str | None = None,
    ) -> list[Any]:
        # Newest first, matching how the admin console lists content.
        stmt = (
            select(self._model)
            .where(*self._scoped(filters, category))
            .order_by(desc(self._model.created_at))
        )
        return list((await self._session.execute(stmt)).scalars().all())

    async def count(
        self,
        *,
        filters: Sequence[ColumnElement[bool]] = (),
        category: str | None = None,
    ) -> int:
        stmt = select(func.count()).select_from(self._model).where(*self._scoped(filters, category))
        return int((await self._session.execute(stmt)).scalar_one())

    async def get(self, entry_id: uuid.UUID, *, category: str | None = None) -> Any | None:
        entry = await self._session.get(self._model, entry_id)
        if entry is None:
            return None
        if category is not None and getattr(entry, "category", None) != category:
            return None
        return entry

    async def first(self) -> Any | None:
        stmt = select(self._model).order_by(self._model.created_at).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def find_one(self, **values: Any) -> Any | None:
        stmt = select(self._model).filter_by(**values).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def exists(self, values: dict[str, Any], *, exclude_id: uuid.UUID | None = None) -> bool:
        """
        True when another entry already holds all of `values`.
        `exclude_id` lets updates ignore the entry being modified.
        """

        conditions = [getattr(self._model, k) == v for k, v in values.items()]
        if exclude_id is not None:
            conditions.append(self._model.id != exclude_id)
        stmt = select(self._model.id).where(and_(*conditions)).limit(1)
        return (await self._session.execute(stmt)).first() is not None

    async def create(self, values: dict[str, Any]) -> Any:
        entry = self._model(**values)
        self._session.add(entry)
        await self._session.flush()
        return entry

    async def update(self, entry: Any, values: dict[str, Any]) -> Any:
        for key, value in values.items():
            setattr(entry, key, value)
        await self._session.flush()
        return entry

    async def delete(self, entry: Any) -> None:
        await self._session.delete(entry)
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Search clauses come from `db.filters.prepare_search_filters`; this module never
# interprets raw query strings itself.
