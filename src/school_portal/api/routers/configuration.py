"""
school_portal.api.routers.configuration

Site configuration endpoints (a single row).

Responsibilities:
- Public read of the configuration.
- Admin create-or-update, partial update and delete.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.deps import db_session, storage_dep
from school_portal.api.payload import content_type_guard, read_payload
from school_portal.api.responses import from_result
from school_portal.auth.deps import require_admin
from school_portal.resources.catalog import CONFIGURATION
from school_portal.services.crud import CrudService
from school_portal.services.storage import LocalFileStorage

router = APIRouter(tags=[CONFIGURATION.label])

ADMIN_PATH = "/api/v1/admin/configuration"
WRITE_DEPENDENCIES = [
    Depends(content_type_guard(*CONFIGURATION.content_types)),
    Depends(require_admin),
]


def _service(session: AsyncSession, storage: LocalFileStorage | None = None) -> CrudService:
    return CrudService(session=session, spec=CONFIGURATION, storage=storage)


@router.get("/api/v1/configuration")
async def get_configuration(
    request: Request, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    return from_result(request, await _service(session).fetch_singleton())


@router.post(ADMIN_PATH, dependencies=WRITE_DEPENDENCIES)
async def save_configuration(
    request: Request,
    session: AsyncSession = Depends(db_session),
    storage: LocalFileStorage = Depends(storage_dep),
) -> JSONResponse:
    # Creates the row on first use and updates it afterwards, so the create
    # schema (required fields) only applies when nothing is stored yet.
    svc = _service(session, storage)
    exists = await svc.has_singleton()
    payload = await read_payload(
        request,
        CONFIGURATION.update_schema if exists else CONFIGURATION.create_schema,
        allowed_content_types=CONFIGURATION.content_types,
        spec=CONFIGURATION,
        partial=exists,
    )
    return from_result(request, await svc.save_singleton(payload.values, payload.uploads))


@router.patch(ADMIN_PATH, dependencies=WRITE_DEPENDENCIES)
async def update_configuration(
    request: Request,
    session: AsyncSession = Depends(db_session),
    storage: LocalFileStorage = Depends(storage_dep),
) -> JSONResponse:
    payload = await read_payload(
        request,
        CONFIGURATION.update_schema,
        allowed_content_types=CONFIGURATION.content_types,
        spec=CONFIGURATION,
        partial=True,
    )
    result = await _service(session, storage).update_singleton(
        payload.values, payload.uploads, payload.deletions
    )
    return from_result(request, result)


@router.delete(ADMIN_PATH, dependencies=[Depends(require_admin)])
async def delete_configuration(
    request: Request,
    session: AsyncSession = Depends(db_session),
    storage: LocalFileStorage = Depends(storage_dep),
) -> JSONResponse:
    return from_result(request, await _service(session, storage).delete_singleton())
