"""
school_portal.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide dependency functions for settings, DB sessions, file storage and mail.
- Encapsulate app.state access patterns (engine/sessionmaker/storage/mailer).
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from school_portal.services.mailer import Mailer
from school_portal.services.storage import LocalFileStorage
from school_portal.settings import Settings


def settings_dep(request: Request) -> Settings:
    # The app factory stores the settings it was built with; tests rely on this.
    return request.app.state.settings  # type: ignore[attr-defined]


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the app lifespan (`school_portal.api.app`).
    return request.app.state.sessionmaker  # type: ignore[attr-defined]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Commit/rollback is managed explicitly by the service layer.
    async with session_factory() as session:
        yield session


def storage_dep(request: Request) -> LocalFileStorage:
    return request.app.state.storage  # type: ignore[attr-defined]


def mailer_dep(request: Request) -> Mailer:
    return request.app.state.mailer  # type: ignore[attr-defined]


# --- Module Notes -----------------------------------------------------------
# Everything here is created once per process in the lifespan; handlers never
# construct infrastructure themselves.
