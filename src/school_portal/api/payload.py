"""
school_portal.api.payload

Request payload reading for JSON and multipart endpoints.

Responsibilities:
- Enforce the content types an endpoint accepts (415 otherwise).
- Read JSON bodies or multipart forms, separating uploads and delete lists from
  plain fields and collecting repeated form keys into lists.
- Reject oversized uploads before their content is read into memory.
- Validate plain fields against a pydantic schema and query strings against a
  query schema, reporting failures as `{path, message}` lists.
"""

from __future__ import annotations

import json
from collections.abc import Collection
from dataclasses import dataclass, field
from typing import Any

from fastapi import Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import UploadFile

from school_portal.errors import BadRequestError, PayloadValidationError, UnsupportedContentTypeError
from school_portal.resources.registry import FORM_DATA, ResourceSpec
from school_portal.services.storage import Upload


@dataclass(slots=True)
class Payload:
    values: dict[str, Any] = field(default_factory=dict)
    uploads: dict[str, list[Upload]] = field(default_factory=dict)
    deletions: dict[str, list[str]] = field(default_factory=dict)


def validation_errors(exc: ValidationError) -> list[dict[str, str]]:
    return [
        {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
        for err in exc.errors()
    ]


def media_type(request: Request) -> str:
    return (request.headers.get("content-type") or "").split(";", 1)[0].strip().lower()


def ensure_content_type(request: Request, allowed: Collection[str]) -> str:
    content_type = media_type(request)
    if content_type not in allowed:
        raise UnsupportedContentTypeError(content_type)
    return content_type


def content_type_guard(*allowed: str):
    """
    Dependency factory; list it before auth so unsupported bodies fail first.
    """

    def _dep(request: Request) -> None:
        ensure_content_type(request, allowed)

    return _dep


async def _read_json(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        raise BadRequestError("Request body is empty, expected data in JSON format.")
    try:
        body = json.loads(raw)
    except ValueError as e:
        raise BadRequestError("Invalid JSON body or empty request body.") from e
    if not isinstance(body, dict):
        raise BadRequestError("Invalid JSON body or empty request body.")
    return body


async def _read_form(
    request: Request, list_keys: Collection[str]
) -> tuple[dict[str, Any], dict[str, list[UploadFile]]]:
    form = await request.form()
    values: dict[str, list[Any]] = {}
    files: dict[str, list[UploadFile]] = {}
    for key, value in form.multi_items():
        if isinstance(value, UploadFile):
            # Browsers submit empty file inputs as nameless parts.
            if value.filename:
                files.setdefault(key, []).append(value)
            continue
        values.setdefault(key, []).append(value)

    collapsed: dict[str, Any] = {}
    for key, items in values.items():
        collapsed[key] = items if key in list_keys or len(items) > 1 else items[0]
    return collapsed, files


def _as_id_list(value: Any) -> list[str]:
    if value in (None, ""):
        return []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if str(v)]
    return [str(value)]


async def read_payload(
    request: Request,
    schema: type[BaseModel],
    *,
    allowed_content_types: Collection[str],
    spec: ResourceSpec | None = None,
    partial: bool = False,
) -> Payload:
    """
    Reads and validates a write payload.

    `partial=True` (updates) keeps only the fields the caller actually sent.
    Uploads and delete lists are returned by attribute name. Only the size limit is
    checked here; the CRUD service applies the remaining upload rules.
    """

    content_type = ensure_content_type(request, allowed_content_types)
    list_keys = spec.list_keys if spec is not None else frozenset()
    file_aliases = spec.file_aliases if spec is not None else {}
    delete_keys = spec.delete_keys if spec is not None else {}
    file_rules = spec.files if spec is not None else {}

    if content_type == FORM_DATA:
        raw, files = await _read_form(request, list_keys)
    else:
        raw, files = await _read_json(request), {}

    errors: list[dict[str, str]] = []
    payload = Payload()

    for key, items in files.items():
        name = file_aliases.get(key)
        if name is None:
            errors.append({"path": key, "message": "Unexpected file field"})
            continue
        rule = file_rules[name]
        uploads: list[Upload] = []
        for item in items:
            filename = item.filename or ""
            # Parts are spooled to disk by the form parser; never pull more than
            # one byte past the limit into memory.
            if item.size is not None and item.size > rule.max_size:
                errors.append({"path": key, "message": rule.size_error(filename)})
                continue
            data = await item.read(rule.max_size + 1)
            if len(data) > rule.max_size:
                errors.append({"path": key, "message": rule.size_error(filename)})
                continue
            uploads.append(
                Upload(
                    filename=filename,
                    content_type=(item.content_type or "").lower(),
                    data=data,
                )
            )
        payload.uploads[name] = uploads

    for key in list(raw):
        if key in delete_keys:
            payload.deletions[delete_keys[key]] = _as_id_list(raw.pop(key))
        elif key in file_aliases:
            value = raw.pop(key)
            if value not in (None, ""):
                errors.append({"path": key, "message": "Expected a file upload"})

    model: BaseModel | None = None
    try:
        model = schema.model_validate(raw)
    except ValidationError as e:
        errors.extend(validation_errors(e))

    if errors or model is None:
        raise PayloadValidationError(errors)

    payload.values = model.model_dump(exclude_unset=partial, exclude_none=True)
    return payload


def read_query(request: Request, schema: type[BaseModel]) -> dict[str, Any]:
    grouped: dict[str, list[str]] = {}
    for key, value in request.query_params.multi_items():
        grouped.setdefault(key, []).append(value)
    raw = {k: v if len(v) > 1 else v[0] for k, v in grouped.items()}
    try:
        model = schema.model_validate(raw)
    except ValidationError as e:
        raise PayloadValidationError(validation_errors(e)) from e
    return model.model_dump(exclude_none=True)


# --- Module Notes -----------------------------------------------------------
# Field names in `Payload.values` are attribute names (snake_case); the API-facing
# camelCase names only exist at this boundary and in `resources.selection`.
