"""
school_portal.api.routers.auth

Admin authentication endpoints.

Responsibilities:
- Login for admins and super-admins (encrypted password in, encrypted tokens out).
- Password reset request and password reset.
- Token refresh, user verification and profile lookups.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.client_info import request_device_type
from school_portal.api.deps import db_session, mailer_dep, settings_dep
from school_portal.api.payload import read_payload
from school_portal.api.responses import from_result
from school_portal.auth.deps import validate_refresh_token, validate_token
from school_portal.auth.models import CurrentUser
from school_portal.db.models import UserType
from school_portal.resources.fields import Email, text
from school_portal.resources.registry import JSON, ResourceSchema
from school_portal.services.auth_service import AuthService
from school_portal.services.mailer import Mailer
from school_portal.settings import Settings

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])

ALLOWED = (JSON,)

# Passwords arrive encrypted with the shared crypto key.
EncryptedText = text()


class LoginRequest(ResourceSchema):
    email: Email
    password: EncryptedText


class PasswordResetRequest(ResourceSchema):
    email: Email


class PasswordReset(ResourceSchema):
    password: EncryptedText
    confirm_password: EncryptedText


def _service(session: AsyncSession, settings: Settings, mailer: Mailer) -> AuthService:
    return AuthService(session=session, settings=settings, mailer=mailer)


def _register_account_routes(segment: str, user_type: UserType) -> None:
    @router.post(f"/{segment}/login", name=f"{user_type.value}_login")
    async def login(
        request: Request,
        session: AsyncSession = Depends(db_session),
        settings: Settings = Depends(settings_dep),
        mailer: Mailer = Depends(mailer_dep),
    ) -> JSONResponse:
        payload = await read_payload(request, LoginRequest, allowed_content_types=ALLOWED)
        result = await _service(session, settings, mailer).handle_user_login(
            email=payload.values["email"],
            encrypted_password=payload.values["password"],
            user_type=user_type,
            device_type=request_device_type(request),
        )
        return from_result(request, result)

    @router.api_route(
        f"/{segment}/request-new-password",
        methods=["POST", "PUT"],
        name=f"{user_type.value}_request_new_password",
    )
    async def request_new_password(
        request: Request,
        session: AsyncSession = Depends(db_session),
        settings: Settings = Depends(settings_dep),
        mailer: Mailer = Depends(mailer_dep),
    ) -> JSONResponse:
        payload = await read_payload(request, PasswordResetRequest, allowed_content_types=ALLOWED)
        result = await _service(session, settings, mailer).handle_password_reset_request(
            email=payload.values["email"],
            host=request.url.hostname or "localhost",
        )
        return from_result(request, result)

    @router.api_route(
        f"/{segment}/reset-password/{{token}}",
        methods=["POST", "PUT"],
        name=f"{user_type.value}_reset_password",
    )
    async def reset_password(
        request: Request,
        token: str,
        session: AsyncSession = Depends(db_session),
        settings: Settings = Depends(settings_dep),
        mailer: Mailer = Depends(mailer_dep),
    ) -> JSONResponse:
        return await _reset(request, token, session, settings, mailer)


async def _reset(
    request: Request,
    token: str,
    session: AsyncSession,
    settings: Settings,
    mailer: Mailer,
) -> JSONResponse:
    payload = await read_payload(request, PasswordReset, allowed_content_types=ALLOWED)
    result = await _service(session, settings, mailer).handle_password_reset(
        token=token,
        encrypted_password=payload.values["password"],
        encrypted_confirm_password=payload.values["confirm_password"],
    )
    return from_result(request, result)


_register_account_routes("admin", UserType.admin)
_register_account_routes("super-admin", UserType.super_admin)


@router.api_route("/reset-password/{token}", methods=["POST", "PUT"])
async def reset_password(
    request: Request,
    token: str,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    mailer: Mailer = Depends(mailer_dep),
) -> JSONResponse:
    # Reset tokens are unique across both account tiers.
    return await _reset(request, token, session, settings, mailer)


@router.get("/refresh-token")
async def refresh_token(
    request: Request,
    user: CurrentUser = Depends(validate_refresh_token),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    mailer: Mailer = Depends(mailer_dep),
) -> JSONResponse:
    result = await _service(session, settings, mailer).handle_refresh(user)
    return from_result(request, result)


@router.get("/verify/user/{user_id}")
async def verify_user(
    request: Request,
    user_id: uuid.UUID,
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    mailer: Mailer = Depends(mailer_dep),
) -> JSONResponse:
    result = await _service(session, settings, mailer).handle_verify_user(user_id)
    return from_result(request, result)


@router.get("/profile")
async def profile(
    request: Request,
    user: CurrentUser = Depends(validate_token),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    mailer: Mailer = Depends(mailer_dep),
) -> JSONResponse:
    result = await _service(session, settings, mailer).handle_get_profile(user)
    return from_result(request, result)


# --- Module Notes -----------------------------------------------------------
# Bodies are read with `read_payload` rather than typed FastAPI body parameters so
# that empty/invalid JSON and unsupported content types share the resource
# endpoints' messages.
