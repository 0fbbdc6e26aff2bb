"""
school_portal.auth.jwt

JWT issuing and validation helpers.

Responsibilities:
- Issue an access/refresh token pair for an authenticated admin.
- Decode and validate tokens with strict claim requirements (iss/aud/exp/iat/sub).

Access and refresh tokens are signed with different secrets and carry a `type`
claim, so one can never be replayed as the other.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from school_portal.observability.logging import get_logger
from school_portal.settings import Settings

log = get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenConfig:
    # Algorithm/issuer/audience are enforced during decoding.
    type: str
    alg: str
    issuer: str
    audience: str
    secret: str
    ttl: timedelta


def access_token_config(settings: Settings) -> TokenConfig:
    return TokenConfig(
        type=ACCESS,
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_access_secret,
        ttl=timedelta(minutes=settings.jwt_access_ttl_minutes),
    )


def refresh_token_config(settings: Settings) -> TokenConfig:
    return TokenConfig(
        type=REFRESH,
        alg=settings.jwt_alg,
        issuer=settings.jwt_issuer,
        audience=settings.jwt_audience,
        secret=settings.jwt_refresh_secret,
        ttl=timedelta(minutes=settings.jwt_refresh_ttl_minutes),
    )


@dataclass(frozen=True, slots=True)
class IssuedTokens:
    access_token: str
    refresh_token: str
    token_details: dict[str, Any]


def _sign(cfg: TokenConfig, details: dict[str, Any], subject: str, now: datetime) -> str:
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + cfg.ttl).timestamp()),
        "type": cfg.type,
        **details,
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def create_authentication_tokens(
    *,
    access_cfg: TokenConfig,
    refresh_cfg: TokenConfig,
    user_id: str,
    device_type: str,
    user_type: str,
) -> IssuedTokens:
    now = datetime.now(tz=UTC)
    # Both tokens share one id so a session can be traced across refreshes.
    details: dict[str, Any] = {
        "tokenId": str(uuid.uuid4()),
        "expiry": (now + access_cfg.ttl).isoformat(),
        "currentUser": {"id": user_id, "deviceType": device_type, "userType": user_type},
    }
    return IssuedTokens(
        access_token=_sign(access_cfg, details, user_id, now),
        refresh_token=_sign(refresh_cfg, details, user_id, now),
        token_details=details,
    )


def verify_token(cfg: TokenConfig, token: str) -> dict[str, Any] | None:
    """
    Returns the claims, or None when the token is invalid, expired or of the wrong type.
    """

    try:
        claims = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
            },
        )
    except InvalidTokenError as e:
        log.info("auth.token_rejected", token_type=cfg.type, reason=str(e))
        return None
    if claims.get("type") != cfg.type:
        log.info("auth.token_rejected", token_type=cfg.type, reason="wrong token type")
        return None
    return claims


# --- Module Notes -----------------------------------------------------------
# Token configs are built from settings by `access_token_config` / `refresh_token_config`;
# `auth.deps` verifies and `services.auth_service` issues.
