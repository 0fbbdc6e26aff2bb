"""
school_portal.api.routers.newsletter

Newsletter subscription endpoints.

Responsibilities:
- Public subscribe (idempotent).
- Admin list, lookup and removal by email.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.deps import db_session
from school_portal.api.payload import read_payload, read_query
from school_portal.api.responses import from_result
from school_portal.auth.deps import require_admin
from school_portal.resources.catalog import NEWSLETTER
from school_portal.services.crud import CrudService
from school_portal.services.inbox import subscribe_to_newsletter

router = APIRouter(tags=[NEWSLETTER.label])

ADMIN_PATH = "/api/v1/admin/newsletter"


@router.post("/api/v1/newsletter")
async def subscribe(request: Request, session: AsyncSession = Depends(db_session)) -> JSONResponse:
    payload = await read_payload(
        request,
        NEWSLETTER.create_schema,
        allowed_content_types=NEWSLETTER.content_types,
        spec=NEWSLETTER,
    )
    return from_result(request, await subscribe_to_newsletter(session, payload.values["email"]))


@router.get(ADMIN_PATH, dependencies=[Depends(require_admin)])
async def list_subscribers(
    request: Request, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    criteria = read_query(request, NEWSLETTER.query_schema)
    result = await CrudService(session=session, spec=NEWSLETTER).fetch_entry_list(criteria)
    return from_result(request, result)


@router.get(f"{ADMIN_PATH}/{{email}}", dependencies=[Depends(require_admin)])
async def get_subscriber(
    request: Request, email: str, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    result = await CrudService(session=session, spec=NEWSLETTER).fetch_entry_by_email(email.lower())
    return from_result(request, result)


@router.delete(f"{ADMIN_PATH}/{{email}}", dependencies=[Depends(require_admin)])
async def unsubscribe(
    request: Request, email: str, session: AsyncSession = Depends(db_session)
) -> JSONResponse:
    result = await CrudService(session=session, spec=NEWSLETTER).delete_entry_by_email(email.lower())
    return from_result(request, result)
