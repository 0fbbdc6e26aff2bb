"""
school_portal.api.routers.contact

Contact form endpoints.

Responsibilities:
- Public submission (stored, then mailed to the sender and the system admin).
- Admin list, lookup and removal.
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.deps import db_session, mailer_dep, settings_dep
from school_portal.api.payload import read_payload, read_query
from school_portal.api.responses import from_result
from school_portal.auth.deps import require_admin
from school_portal.resources.catalog import CONTACT
from school_portal.services.crud import CrudService
from school_portal.services.inbox import submit_contact_message
from school_portal.services.mailer import Mailer
from school_portal.settings import Settings

router = APIRouter(tags=[CONTACT.label])

ADMIN_PATH = "/api/v1/admin/contact"


@router.post("/api/v1/contact")
async def submit(
    request: Request,
    session: AsyncSession = Depends(db_session),
    mailer: Mailer = Depends(mailer_dep),
    settings: Settings = Depends(settings_dep),
) -> JSONResponse:
    payload = await read_payload(
        request,
        CONTACT.create_schema,
        allowed_content_types=CONTACT.content_types,
        spec=CONTACT,
    )
    result = await submit_contact_message(session, mailer, settings, payload.values)
    return from_result(request, result)


@router.get(ADMIN_PATH, dependencies=[Depends(require_admin)])
async def list_messages(
    request: Request, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    criteria = read_query(request, CONTACT.query_schema)
    result = await CrudService(session=session, spec=CONTACT).fetch_entry_list(criteria)
    return from_result(request, result)


@router.get(f"{ADMIN_PATH}/{{entry_id}}", dependencies=[Depends(require_admin)])
async def get_message(
    request: Request, entry_id: uuid.UUID, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    result = await CrudService(session=session, spec=CONTACT).fetch_entry_by_id(entry_id)
    return from_result(request, result)


@router.delete(f"{ADMIN_PATH}/{{entry_id}}", dependencies=[Depends(require_admin)])
async def delete_message(
    request: Request, entry_id: uuid.UUID, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    result = await CrudService(session=session, spec=CONTACT).delete_entry_by_id(entry_id)
    return from_result(request, result)
