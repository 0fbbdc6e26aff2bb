"""
school_portal.db.repositories.admins

Repository for `Admin` accounts.

Responsibilities:
- Look up admins by id, email and reset-password token.
- Create admins and rotate their passwords / reset tokens.
"""

from __future__ import annotations

import uuid
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.db.models import Admin, UserType


class AdminRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, admin_id: uuid.UUID) -> Admin | None:
        return await self._session.get(Admin, admin_id)

    async def get_by_email(self, email: str) -> Admin | None:
        stmt = select(Admin).where(Admin.email == email.lower())
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def get_by_reset_token(self, token: str) -> Admin | None:
        stmt = select(Admin).where(Admin.reset_password_token == token)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def create(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        user_type: UserType = UserType.admin,
    ) -> Admin:
        admin = Admin(
            name=name,
            email=email.lower(),
            password=password_hash,
            user_type=user_type,
        )
        self._session.add(admin)
        await self._session.flush()
        return admin

    async def set_password(self, admin: Admin, *, password_hash: str) -> None:
        # A consumed reset token must never be usable twice.
        admin.password = password_hash
        admin.reset_password_token = None
        admin.reset_password_token_expiration = None
        await self._session.flush()

    async def set_reset_token(self, admin: Admin, *, token: str, expires_at: datetime) -> None:
        admin.reset_password_token = token
        admin.reset_password_token_expiration = expires_at
        await self._session.flush()


# --- Module Notes -----------------------------------------------------------
# Emails are stored lower-cased so lookups are case-insensitive.
