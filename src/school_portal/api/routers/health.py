"""
school_portal.api.routers.health

Health and readiness endpoints.

Responsibilities:
- Provide liveness probe (`/healthz`).
- Provide readiness probe (`/readyz`) with DB connectivity validation.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.deps import db_session
from school_portal.api.responses import ok

router = APIRouter()


@router.get("/healthz")
async def healthz(request: Request) -> JSONResponse:
    # Liveness: process is up and serving HTTP.
    return ok(request, "Service is up.", {"status": "ok"})


@router.get("/readyz")
async def readyz(request: Request, session: AsyncSession = Depends(db_session)) -> JSONResponse:
    # Readiness: verify critical dependency (DB) is reachable.
    await session.execute(text("SELECT 1"))
    return ok(request, "Service is ready.", {"status": "ready"})


# --- Module Notes -----------------------------------------------------------
# A failing `/readyz` query surfaces as a 503 through the OperationalError handler.
