"""
school_portal.api.routers.index

API index endpoints.

Responsibilities:
- `GET /api`: welcome message, API metadata and public contacts.
- `GET /api/v1`: version metadata, upload limits, CORS and token lifetimes.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from school_portal.api.deps import settings_dep
from school_portal.api.responses import ok
from school_portal.resources.catalog import REGISTRY
from school_portal.resources.registry import DOCUMENT_TYPES, MAX_FILE_SIZE
from school_portal.settings import Settings

router = APIRouter(prefix="/api", tags=["index"])


def _drop_empty(values: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in values.items() if v not in (None, "", {}, [])}


@router.get("")
async def api_index(request: Request, settings: Settings = Depends(settings_dep)) -> JSONResponse:
    data = {
        "message": f"Welcome to {settings.api_name} API.",
        "description": settings.api_description,
        "api": _drop_empty(
            {
                "version": settings.api_version,
                "license": settings.api_license,
                "details": {
                    "documentation": {"docs": "/docs", "openapi": "/openapi.json"},
                    "endpoints": {"v1": "/api/v1"},
                },
            }
        ),
        "contact": {
            "support": _drop_empty(
                {"email": settings.support_email, "mobile": settings.support_mobile}
            ),
        },
    }
    return ok(request, "Request successful.", data)


@router.get("/v1")
async def api_v1_index(request: Request, settings: Settings = Depends(settings_dep)) -> JSONResponse:
    # Public metadata only: secrets and connection strings never leave Settings.
    data = {
        "message": f"Welcome to {settings.api_name} API v1.",
        "description": settings.api_description,
        "api": {
            "version": settings.api_version,
            "endpoints": sorted(f"/api/v1/{slug}" for slug in REGISTRY),
            "details": {
                "uploads": {
                    "maxFileSize": MAX_FILE_SIZE,
                    "allowedTypes": list(DOCUMENT_TYPES),
                },
                "cors": {"allowedOrigins": settings.cors_allowed_origins},
                "jwt": {
                    "accessToken": {"expirationMinutes": settings.jwt_access_ttl_minutes},
                    "refreshToken": {"expirationMinutes": settings.jwt_refresh_ttl_minutes},
                    "resetPasswordToken": {
                        "expirationMinutes": settings.reset_password_ttl_minutes
                    },
                },
            },
        },
    }
    return ok(request, "Request successful.", data)
