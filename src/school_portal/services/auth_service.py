"""
school_portal.services.auth_service

Admin authentication flows.

Responsibilities:
- Login (encrypted password in, encrypted token pair out).
- Password reset request (token + mailed link) and password reset.
- Token refresh, profile and user verification lookups.
"""

from __future__ import annotations

import secrets
import uuid
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from school_portal.auth.crypto import decrypt_data, encrypt_data
from school_portal.auth.jwt import (
    access_token_config,
    create_authentication_tokens,
    refresh_token_config,
)
from school_portal.auth.models import CurrentUser
from school_portal.auth.passwords import check_password_policy, hash_password, verify_password
from school_portal.db.models import Admin, UserType, utcnow
from school_portal.db.repositories.admins import AdminRepo
from school_portal.errors import (
    BadRequestError,
    ForbiddenError,
    NotFoundError,
    PayloadValidationError,
    UnauthorizedError,
)
from school_portal.observability.logging import get_logger
from school_portal.services.crud import ServiceResult
from school_portal.services.mailer import Mailer
from school_portal.settings import Settings

log = get_logger(__name__)

RESET_TOKEN_BYTES = 20


class AuthService:
    def __init__(self, *, session: AsyncSession, settings: Settings, mailer: Mailer) -> None:
        self._session = session
        self._settings = settings
        self._mailer = mailer
        self._admins = AdminRepo(session)

    def _issue(self, *, user_id: uuid.UUID, device_type: str, user_type: str) -> dict[str, str]:
        tokens = create_authentication_tokens(
            access_cfg=access_token_config(self._settings),
            refresh_cfg=refresh_token_config(self._settings),
            user_id=str(user_id),
            device_type=device_type,
            user_type=user_type,
        )
        key = self._settings.crypto_secret_key
        return {
            "accessToken": encrypt_data(key, tokens.access_token),
            "refreshToken": encrypt_data(key, tokens.refresh_token),
        }

    async def handle_user_login(
        self, *, email: str, encrypted_password: str, user_type: UserType, device_type: str
    ) -> ServiceResult:
        admin = await self._admins.get_by_email(email)
        if admin is None:
            raise UnauthorizedError(
                "Unauthorized access. Please check your email and password and try again."
            )
        # Super-admin endpoints only accept super-admin accounts.
        if user_type == UserType.super_admin and admin.user_type != UserType.super_admin:
            raise ForbiddenError()

        password = decrypt_data(self._settings.crypto_secret_key, encrypted_password)
        if not verify_password(password, admin.password):
            raise UnauthorizedError(
                "Incorrect password. Please try again or use the forgot password option to reset it."
            )

        data = self._issue(user_id=admin.id, device_type=device_type, user_type=str(admin.user_type))
        log.info("auth.login", admin_id=str(admin.id), device_type=device_type)
        await self._mailer.send(
            to=admin.email,
            subject="Successful login",
            body=(
                f"Dear {admin.name},\n\n"
                f"Your account was just signed in from a {device_type} device.\n"
                "If this was not you, reset your password immediately."
            ),
        )
        return ServiceResult(status.HTTP_200_OK, "Authorized.", data)

    def _reset_link(self, host: str, token: str) -> str:
        if self._settings.env == "prod":
            return f"https://{host}/auth/reset-password/{token}"
        return f"http://{host}:3000/auth/reset-password/{token}"

    async def handle_password_reset_request(self, *, email: str, host: str) -> ServiceResult:
        admin = await self._admins.get_by_email(email)
        if admin is None:
            raise NotFoundError("User not found. Please sign up first.")

        token = secrets.token_hex(RESET_TOKEN_BYTES)
        expires_at = utcnow() + timedelta(minutes=self._settings.reset_password_ttl_minutes)
        await self._admins.set_reset_token(admin, token=token, expires_at=expires_at)
        await self._session.commit()

        link = self._reset_link(host, token)
        await self._mailer.send(
            to=admin.email,
            subject="Reset your password",
            body=(
                f"Dear {admin.name},\n\n"
                f"Use the link below to choose a new password:\n{link}\n\n"
                f"The link expires in {self._settings.reset_password_ttl_minutes} minutes."
            ),
        )
        log.info("auth.reset_requested", admin_id=str(admin.id))
        return ServiceResult(status.HTTP_200_OK, "Password reset email sent successfully.")

    async def handle_password_reset(
        self, *, token: str, encrypted_password: str, encrypted_confirm_password: str
    ) -> ServiceResult:
        key = self._settings.crypto_secret_key
        password = decrypt_data(key, encrypted_password)
        confirm = decrypt_data(key, encrypted_confirm_password)
        if password != confirm:
            raise PayloadValidationError([{"path": "confirmPassword", "message": "Passwords must match"}])
        check_password_policy(password)

        admin = await self._admins.get_by_reset_token(token)
        if admin is None or not _token_alive(admin):
            raise BadRequestError("Invalid reset password token.")

        await self._admins.set_password(admin, password_hash=hash_password(password))
        await self._session.commit()

        await self._mailer.send(
            to=admin.email,
            subject="Password reset successful",
            body=f"Dear {admin.name},\n\nYour password has been reset successfully.",
        )
        log.info("auth.password_reset", admin_id=str(admin.id))
        return ServiceResult(status.HTTP_200_OK, "Password reset successful.")

    async def handle_refresh(self, user: CurrentUser) -> ServiceResult:
        data = self._issue(user_id=user.id, device_type=user.device_type, user_type=user.user_type)
        return ServiceResult(status.HTTP_200_OK, "Authorized.", data)

    async def handle_get_profile(self, user: CurrentUser) -> ServiceResult:
        return ServiceResult(status.HTTP_200_OK, "Profile fetched successfully.", user.to_profile())

    async def handle_verify_user(self, user_id: uuid.UUID) -> ServiceResult:
        admin = await self._admins.get(user_id)
        if admin is None:
            raise NotFoundError("User not found.")
        return ServiceResult(
            status.HTTP_200_OK,
            "User verified.",
            {
                "id": str(admin.id),
                "name": admin.name,
                "email": admin.email,
                "userType": str(admin.user_type),
            },
        )


def _token_alive(admin: Admin) -> bool:
    expires_at = admin.reset_password_token_expiration
    return expires_at is not None and expires_at > utcnow()


# --- Module Notes -----------------------------------------------------------
# Reset tokens are random hex strings stored on the admin row, not JWTs; a reset
# clears them so each link works once.
