"""
school_portal.api.routers.resources

Generic router factory for content resources.

Responsibilities:
- Generate public read routes and admin write routes for every `ResourceSpec`
  flagged for generic routing.
- Keep handlers thin: read query/payload, delegate to `CrudService`, wrap the
  `ServiceResult` in the response envelope.

Route shapes (`<slug>` may contain a slash, e.g. `gallery/photo`):
- plain:       GET /api/v1/<slug>, GET /api/v1/<slug>/{id}
               POST /api/v1/admin/<slug>, PATCH|DELETE /api/v1/admin/<slug>/{id}
- categorized: GET /api/v1/<slug> (every category), GET /api/v1/<slug>/{category},
               GET /api/v1/<slug>/{category}/{id}
               POST /api/v1/admin/<slug>/{category},
               PATCH|DELETE /api/v1/admin/<slug>/{category}/{id}
Resources that are not publicly readable get their GET routes under the admin
prefix instead.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from school_portal.api.deps import db_session, storage_dep
from school_portal.api.payload import content_type_guard, read_payload, read_query
from school_portal.api.responses import from_result
from school_portal.auth.deps import require_admin
from school_portal.resources.registry import ResourceSpec
from school_portal.services.crud import CrudService
from school_portal.services.storage import LocalFileStorage

PUBLIC_PREFIX = "/api/v1"
ADMIN_PREFIX = "/api/v1/admin"


def build_resource_router(specs: Iterable[ResourceSpec]) -> APIRouter:
    router = APIRouter()
    for spec in specs:
        if not spec.generic_routes:
            continue
        if spec.categorized:
            _add_categorized_routes(router, spec)
        else:
            _add_plain_routes(router, spec)
    return router


def _read_route(spec: ResourceSpec) -> tuple[str, list]:
    if spec.public_read:
        return f"{PUBLIC_PREFIX}/{spec.slug}", []
    return f"{ADMIN_PREFIX}/{spec.slug}", [Depends(require_admin)]


def _write_dependencies(spec: ResourceSpec) -> list:
    # Content type is checked before the token so unsupported bodies fail with 415.
    return [Depends(content_type_guard(*spec.content_types)), Depends(require_admin)]


def _add_plain_routes(router: APIRouter, spec: ResourceSpec) -> None:
    read_base, read_deps = _read_route(spec)
    admin_base = f"{ADMIN_PREFIX}/{spec.slug}"
    tags = [spec.label]

    @router.get(read_base, name=f"{spec.name}_list", tags=tags, dependencies=read_deps)
    async def list_entries(
        request: Request, session: AsyncSession = Depends(db_session)
    ) -> JSONResponse:
        criteria = read_query(request, spec.query_schema)
        result = await CrudService(session=session, spec=spec).fetch_entry_list(criteria)
        return from_result(request, result)

    @router.get(
        f"{read_base}/{{entry_id}}", name=f"{spec.name}_get", tags=tags, dependencies=read_deps
    )
    async def get_entry(
        request: Request, entry_id: uuid.UUID, session: AsyncSession = Depends(db_session)
    ) -> JSONResponse:
        result = await CrudService(session=session, spec=spec).fetch_entry_by_id(entry_id)
        return from_result(request, result)

    @router.post(
        admin_base, name=f"{spec.name}_create", tags=tags, dependencies=_write_dependencies(spec)
    )
    async def create_entry(
        request: Request,
        session: AsyncSession = Depends(db_session),
        storage: LocalFileStorage = Depends(storage_dep),
    ) -> JSONResponse:
        payload = await read_payload(
            request, spec.create_schema, allowed_content_types=spec.content_types, spec=spec
        )
        svc = CrudService(session=session, spec=spec, storage=storage)
        result = await svc.create_entry(payload.values, payload.uploads)
        return from_result(request, result)

    @router.patch(
        f"{admin_base}/{{entry_id}}",
        name=f"{spec.name}_update",
        tags=tags,
        dependencies=_write_dependencies(spec),
    )
    async def update_entry(
        request: Request,
        entry_id: uuid.UUID,
        session: AsyncSession = Depends(db_session),
        storage: LocalFileStorage = Depends(storage_dep),
    ) -> JSONResponse:
        payload = await read_payload(
            request,
            spec.update_schema,
            allowed_content_types=spec.content_types,
            spec=spec,
            partial=True,
        )
        svc = CrudService(session=session, spec=spec, storage=storage)
        result = await svc.update_entry(entry_id, payload.values, payload.uploads, payload.deletions)
        return from_result(request, result)

    @router.delete(
        f"{admin_base}/{{entry_id}}",
        name=f"{spec.name}_delete",
        tags=tags,
        dependencies=[Depends(require_admin)],
    )
    async def delete_entry(
        request: Request,
        entry_id: uuid.UUID,
        session: AsyncSession = Depends(db_session),
        storage: LocalFileStorage = Depends(storage_dep),
    ) -> JSONResponse:
        svc = CrudService(session=session, spec=spec, storage=storage)
        result = await svc.delete_entry_by_id(entry_id)
        return from_result(request, result)


def _add_categorized_routes(router: APIRouter, spec: ResourceSpec) -> None:
    read_base, read_deps = _read_route(spec)
    admin_base = f"{ADMIN_PREFIX}/{spec.slug}"
    tags = [spec.label]

    @router.get(read_base, name=f"{spec.name}_list", tags=tags, dependencies=read_deps)
    async def list_all_entries(
        request: Request, session: AsyncSession = Depends(db_session)
    ) -> JSONResponse:
        criteria = read_query(request, spec.query_schema)
        result = await CrudService(session=session, spec=spec).fetch_entry_list(criteria)
        return from_result(request, result)

    @router.get(
        f"{read_base}/{{category}}",
        name=f"{spec.name}_list_by_category",
        tags=tags,
        dependencies=read_deps,
    )
    async def list_entries(
        request: Request, category: str, session: AsyncSession = Depends(db_session)
    ) -> JSONResponse:
        criteria = read_query(request, spec.query_schema)
        svc = CrudService(session=session, spec=spec)
        result = await svc.fetch_entry_by_category(category, criteria)
        return from_result(request, result)

    @router.get(
        f"{read_base}/{{category}}/{{entry_id}}",
        name=f"{spec.name}_get_by_category",
        tags=tags,
        dependencies=read_deps,
    )
    async def get_entry(
        request: Request,
        category: str,
        entry_id: uuid.UUID,
        session: AsyncSession = Depends(db_session),
    ) -> JSONResponse:
        svc = CrudService(session=session, spec=spec)
        result = await svc.fetch_entry_by_category_and_id(category, entry_id)
        return from_result(request, result)

    @router.post(
        f"{admin_base}/{{category}}",
        name=f"{spec.name}_create",
        tags=tags,
        dependencies=_write_dependencies(spec),
    )
    async def create_entry(
        request: Request,
        category: str,
        session: AsyncSession = Depends(db_session),
        storage: LocalFileStorage = Depends(storage_dep),
    ) -> JSONResponse:
        spec.check_category(category)
        payload = await read_payload(
            request, spec.create_schema, allowed_content_types=spec.content_types, spec=spec
        )
        svc = CrudService(session=session, spec=spec, storage=storage)
        result = await svc.create_entry(payload.values, payload.uploads, category=category)
        return from_result(request, result)

    @router.patch(
        f"{admin_base}/{{category}}/{{entry_id}}",
        name=f"{spec.name}_update",
        tags=tags,
        dependencies=_write_dependencies(spec),
    )
    async def update_entry(
        request: Request,
        category: str,
        entry_id: uuid.UUID,
        session: AsyncSession = Depends(db_session),
        storage: LocalFileStorage = Depends(storage_dep),
    ) -> JSONResponse:
        spec.check_category(category)
        payload = await read_payload(
            request,
            spec.update_schema,
            allowed_content_types=spec.content_types,
            spec=spec,
            partial=True,
        )
        svc = CrudService(session=session, spec=spec, storage=storage)
        result = await svc.update_entry(
            entry_id, payload.values, payload.uploads, payload.deletions, category=category
        )
        return from_result(request, result)

    @router.delete(
        f"{admin_base}/{{category}}/{{entry_id}}",
        name=f"{spec.name}_delete",
        tags=tags,
        dependencies=[Depends(require_admin)],
    )
    async def delete_entry(
        request: Request,
        category: str,
        entry_id: uuid.UUID,
        session: AsyncSession = Depends(db_session),
        storage: LocalFileStorage = Depends(storage_dep),
    ) -> JSONResponse:
        svc = CrudService(session=session, spec=spec, storage=storage)
        result = await svc.delete_entry_by_id(entry_id, category=category)
        return from_result(request, result)


# --- Module Notes -----------------------------------------------------------
# Each handler closes over its `spec`; FastAPI resolves the annotations against this
# module's globals, so nested definitions work with postponed annotations.
