"""
school_portal.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Convert an encrypted bearer token into a typed `CurrentUser`.
- Guard admin endpoints and the refresh-token endpoint.
"""

from __future__ import annotations

import uuid

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.client_info import request_device_type
from school_portal.api.deps import db_session, settings_dep
from school_portal.auth.crypto import decrypt_data
from school_portal.auth.jwt import (
    TokenConfig,
    access_token_config,
    refresh_token_config,
    verify_token,
)
from school_portal.auth.models import CurrentUser
from school_portal.db.models import UserType
from school_portal.db.repositories.admins import AdminRepo
from school_portal.errors import CryptoError, ForbiddenError, UnauthorizedError
from school_portal.observability.logging import get_logger
from school_portal.settings import Settings

log = get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)

INVALID_TOKEN_MESSAGE = "Invalid token provided."


async def _resolve_user(
    request: Request,
    creds: HTTPAuthorizationCredentials | None,
    settings: Settings,
    session: AsyncSession,
    cfg: TokenConfig,
) -> CurrentUser:
    # Authn: the bearer value is the encrypted JWT issued at login.
    if creds is None or not creds.credentials:
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE)
    try:
        token = decrypt_data(settings.crypto_secret_key, creds.credentials)
    except CryptoError as e:
        log.warning("auth.token_decryption_failed")
        raise UnauthorizedError(INVALID_TOKEN_MESSAGE) from e

    claims = verify_token(cfg, token)
    current = (claims or {}).get("currentUser") or {}
    try:
        admin_id = uuid.UUID(str(current.get("id")))
    except ValueError as e:
        raise ForbiddenError() from e

    admin = await AdminRepo(session).get(admin_id)
    if admin is None:
        raise ForbiddenError()

    return CurrentUser(
        id=admin.id,
        email=admin.email,
        name=admin.name,
        user_type=str(admin.user_type),
        device_type=request_device_type(request),
    )


async def validate_token(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> CurrentUser:
    return await _resolve_user(request, creds, settings, session, access_token_config(settings))


async def validate_refresh_token(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_dep),
    session: AsyncSession = Depends(db_session),
) -> CurrentUser:
    return await _resolve_user(request, creds, settings, session, refresh_token_config(settings))


def require_admin(user: CurrentUser = Depends(validate_token)) -> CurrentUser:
    # Authz: both admin tiers may manage content.
    if user.user_type not in (UserType.admin, UserType.super_admin):
        raise ForbiddenError()
    return user


# --- Module Notes -----------------------------------------------------------
# The DB session dependency is shared with the handler (FastAPI caches dependencies
# per request), so loading the admin here costs no extra connection.
