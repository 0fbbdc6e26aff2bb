"""
school_portal.services.crud

Generic CRUD service shared by every content resource.

Responsibilities:
- Fetch lists (with search filters), single entries, category slices and email lookups.
- Create, update and delete entries, enforcing uniqueness and upload rules.
- Keep stored files in step with the rows that reference them.
- Own the transaction: every write commits (or rolls back) here.

Operations return a `ServiceResult` on success and raise `school_portal.errors`
exceptions on failure.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from pydantic.alias_generators import to_camel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette import status

from school_portal.db.filters import prepare_search_filters
from school_portal.db.repositories.entries import EntryRepo
from school_portal.errors import ConflictError, NotFoundError, PayloadValidationError
from school_portal.observability.logging import get_logger
from school_portal.resources.registry import ResourceSpec
from school_portal.resources.selection import select_fields, select_many
from school_portal.services.storage import LocalFileStorage, Upload

log = get_logger(__name__)


@dataclass(slots=True)
class ServiceResult:
    status: int
    message: str
    data: Any = field(default_factory=dict)


class CrudService:
    def __init__(
        self,
        *,
        session: AsyncSession,
        spec: ResourceSpec,
        storage: LocalFileStorage | None = None,
    ) -> None:
        self._session = session
        self._spec = spec
        self._storage = storage
        self._repo = EntryRepo(session, spec.model)

    @property
    def spec(self) -> ResourceSpec:
        return self._spec

    def _project(self, entry: Any) -> dict[str, Any]:
        return select_fields(entry, self._spec.selection_criteria)

    # -- reads -----------------------------------------------------------------

    async def fetch_entry_list(self, criteria: dict[str, Any] | None = None) -> ServiceResult:
        label = self._spec.label
        filters = prepare_search_filters(self._spec.model, criteria or {})
        entries = await self._repo.find_many(filters=filters)
        if not entries:
            raise NotFoundError(f"No {label} available at this time.")
        total = await self._repo.count(filters=filters)
        return ServiceResult(
            status.HTTP_200_OK,
            f"{total} {label} retrieved successfully.",
            select_many(entries, self._spec.selection_criteria),
        )

    async def fetch_entry_by_id(self, entry_id: uuid.UUID) -> ServiceResult:
        entry = await self._repo.get(entry_id)
        if entry is None:
            raise NotFoundError(
                f'No {self._spec.label} entry with the ID: "{entry_id}" available at this time.'
            )
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with the ID: "{entry_id}" retrieved successfully.',
            self._project(entry),
        )

    async def fetch_entry_by_category(
        self, category: str, criteria: dict[str, Any] | None = None
    ) -> ServiceResult:
        self._spec.check_category(category)
        filters = prepare_search_filters(self._spec.model, criteria or {})
        entries = await self._repo.find_many(filters=filters, category=category)
        if not entries:
            raise NotFoundError(
                f'No {self._spec.label} entry with the CATEGORY: "{category}" available at this time.'
            )
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with the CATEGORY: "{category}" retrieved successfully.',
            select_many(entries, self._spec.selection_criteria),
        )

    async def fetch_entry_by_category_and_id(self, category: str, entry_id: uuid.UUID) -> ServiceResult:
        self._spec.check_category(category)
        entry = await self._repo.get(entry_id, category=category)
        if entry is None:
            raise NotFoundError(
                f'No {self._spec.label} entry with the CATEGORY: "{category}" and ID: "{entry_id}" '
                "available at this time."
            )
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with the CATEGORY: "{category}" and ID: "{entry_id}" '
            "retrieved successfully.",
            self._project(entry),
        )

    async def fetch_entry_by_email(self, email: str) -> ServiceResult:
        entry = await self._repo.find_one(email=email)
        if entry is None:
            raise NotFoundError(
                f'No {self._spec.label} entry with the email: "{email}" available at this time.'
            )
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with the email: "{email}" retrieved successfully.',
            self._project(entry),
        )

    # -- writes ----------------------------------------------------------------

    async def create_entry(
        self,
        values: dict[str, Any],
        uploads: dict[str, list[Upload]] | None = None,
        *,
        category: str | None = None,
    ) -> ServiceResult:
        self._spec.check_category(category)
        entry = await self._create(values, uploads or {}, category=category)

        display = self._spec.display_field
        if display and values.get(display) is not None:
            message = (
                f'{self._spec.title_label} entry with {to_camel(display)} '
                f'"{values[display]}" created successfully.'
            )
        else:
            message = f"{self._spec.title_label} entry created successfully."
        return ServiceResult(status.HTTP_201_CREATED, message, self._project(entry))

    async def update_entry(
        self,
        entry_id: uuid.UUID,
        values: dict[str, Any],
        uploads: dict[str, list[Upload]] | None = None,
        deletions: dict[str, list[str]] | None = None,
        *,
        category: str | None = None,
    ) -> ServiceResult:
        self._spec.check_category(category)
        uploads = uploads or {}
        deletions = deletions or {}
        if "category" in values:
            self._spec.check_category(values["category"])
        if not values and not any(uploads.values()) and not any(deletions.values()):
            raise PayloadValidationError(
                [{"path": "", "message": 'At least one field is required along with "id".'}]
            )

        entry = await self._repo.get(entry_id, category=category)
        if entry is None:
            raise NotFoundError(f'{self._spec.title_label} entry with ID "{entry_id}" not found.')

        await self._update(entry, values, uploads, deletions)
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with the ID "{entry_id}" updated successfully.',
            self._project(entry),
        )

    async def delete_entry_by_id(
        self, entry_id: uuid.UUID, *, category: str | None = None
    ) -> ServiceResult:
        self._spec.check_category(category)
        entry = await self._repo.get(entry_id, category=category)
        if entry is None:
            raise NotFoundError(f'{self._spec.title_label} entry with ID: "{entry_id}" not found.')
        await self._delete(entry)
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with ID: "{entry_id}" deleted successfully.',
        )

    async def delete_entry_by_email(self, email: str) -> ServiceResult:
        entry = await self._repo.find_one(email=email)
        if entry is None:
            raise NotFoundError(f'{self._spec.title_label} entry with email: "{email}" not found.')
        await self._delete(entry)
        return ServiceResult(
            status.HTTP_200_OK,
            f'{self._spec.title_label} entry with email: "{email}" deleted successfully.',
        )

    # -- singleton resources ---------------------------------------------------

    async def has_singleton(self) -> bool:
        return await self._repo.first() is not None

    async def fetch_singleton(self) -> ServiceResult:
        entry = await self._repo.first()
        if entry is None:
            raise NotFoundError(f"No {self._spec.label.lower()} found.")
        return ServiceResult(
            status.HTTP_200_OK,
            f"{self._spec.title_label} retrieved successfully.",
            self._project(entry),
        )

    async def save_singleton(
        self, values: dict[str, Any], uploads: dict[str, list[Upload]] | None = None
    ) -> ServiceResult:
        """
        Creates the single row, or updates it in place when it already exists.
        """

        existing = await self._repo.first()
        if existing is not None:
            await self._update(existing, values, uploads or {}, {})
            return ServiceResult(
                status.HTTP_200_OK,
                f"{self._spec.title_label} updated successfully.",
                self._project(existing),
            )
        entry = await self._create(values, uploads or {})
        return ServiceResult(
            status.HTTP_201_CREATED,
            f"{self._spec.title_label} entry created successfully.",
            self._project(entry),
        )

    async def update_singleton(
        self,
        values: dict[str, Any],
        uploads: dict[str, list[Upload]] | None = None,
        deletions: dict[str, list[str]] | None = None,
    ) -> ServiceResult:
        uploads = uploads or {}
        deletions = deletions or {}
        if not values and not any(uploads.values()) and not any(deletions.values()):
            raise PayloadValidationError(
                [{"path": "", "message": "At least one field is required to update."}]
            )
        entry = await self._repo.first()
        if entry is None:
            raise NotFoundError(f"{self._spec.title_label} entry not found.")
        await self._update(entry, values, uploads, deletions)
        return ServiceResult(
            status.HTTP_200_OK,
            f"{self._spec.title_label} entry updated successfully.",
            self._project(entry),
        )

    async def delete_singleton(self) -> ServiceResult:
        entry = await self._repo.first()
        if entry is None:
            raise NotFoundError(f"{self._spec.title_label} entry not found.")
        await self._delete(entry)
        return ServiceResult(
            status.HTTP_200_OK, f"{self._spec.title_label} entry deleted successfully."
        )

    # -- internals -------------------------------------------------------------

    async def _create(
        self,
        values: dict[str, Any],
        uploads: dict[str, list[Upload]],
        *,
        category: str | None = None,
    ) -> Any:
        self._validate_uploads(uploads, creating=True)
        record = dict(values)
        if category is not None:
            record["category"] = category
        await self._ensure_unique(record)

        stored = await self._store(uploads)
        for name, rule in self._spec.files.items():
            descriptors = stored.get(name, [])
            record[name] = descriptors if rule.multiple else (descriptors[0] if descriptors else None)

        try:
            entry = await self._repo.create(record)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            await self._discard(d["fileId"] for ds in stored.values() for d in ds)
            raise
        await self._session.refresh(entry)
        log.info("entry.created", resource=self._spec.slug, entry_id=str(entry.id))
        return entry

    async def _update(
        self,
        entry: Any,
        values: dict[str, Any],
        uploads: dict[str, list[Upload]],
        deletions: dict[str, list[str]],
    ) -> None:
        self._validate_uploads(uploads, creating=False)
        changes = dict(values)

        touched = [
            fields for fields in self._spec.unique if any(f in changes for f in fields)
        ]
        if touched:
            merged = {f: changes.get(f, getattr(entry, f)) for fs in touched for f in fs}
            await self._ensure_unique(merged, exclude_id=entry.id, only=touched)

        self._check_deletions(entry, deletions)
        self._check_totals(entry, uploads, deletions)

        stored = await self._store(uploads)
        obsolete: list[str] = []
        for name, rule in self._spec.files.items():
            new = stored.get(name, [])
            current = getattr(entry, name)
            if rule.multiple:
                dropped = set(deletions.get(name, ()))
                if new or dropped:
                    kept = [d for d in current or [] if d["fileId"] not in dropped]
                    obsolete.extend(d["fileId"] for d in current or [] if d["fileId"] in dropped)
                    changes[name] = kept + new
            elif new:
                if current:
                    obsolete.append(current["fileId"])
                changes[name] = new[0]

        try:
            await self._repo.update(entry, changes)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            await self._discard(d["fileId"] for ds in stored.values() for d in ds)
            raise
        await self._session.refresh(entry)
        await self._discard(obsolete)
        log.info("entry.updated", resource=self._spec.slug, entry_id=str(entry.id))

    async def _delete(self, entry: Any) -> None:
        file_ids = list(self._file_ids(entry))
        entry_id = str(entry.id)
        try:
            await self._repo.delete(entry)
            await self._session.commit()
        except SQLAlchemyError:
            await self._session.rollback()
            raise
        await self._discard(file_ids)
        log.info("entry.deleted", resource=self._spec.slug, entry_id=entry_id)

    async def _ensure_unique(
        self,
        values: dict[str, Any],
        *,
        exclude_id: uuid.UUID | None = None,
        only: list[tuple[str, ...]] | None = None,
    ) -> None:
        for fields in only if only is not None else self._spec.unique:
            candidate = {f: values.get(f) for f in fields}
            if any(v is None for v in candidate.values()):
                continue
            if await self._repo.exists(candidate, exclude_id=exclude_id):
                shown = [f for f in fields if f != "category"] or list(fields)
                detail = " and ".join(f'{to_camel(f)} "{candidate[f]}"' for f in shown)
                raise ConflictError(f"{self._spec.title_label} entry with {detail} already exists.")

    def _validate_uploads(self, uploads: dict[str, list[Upload]], *, creating: bool) -> None:
        errors: list[dict[str, str]] = []
        for name, rule in self._spec.files.items():
            alias = to_camel(name)
            items = uploads.get(name, [])
            if creating and len(items) < rule.min_count:
                errors.append({"path": alias, "message": f"{alias} requires at least {rule.min_count} file(s)"})
            if len(items) > rule.max_count:
                errors.append({"path": alias, "message": f"{alias} accepts at most {rule.max_count} file(s)"})
            for upload in items:
                if upload.content_type not in rule.mime_types:
                    errors.append(
                        {
                            "path": alias,
                            "message": f'Unsupported file type "{upload.content_type}" for '
                            f'"{upload.filename}"; allowed: {", ".join(rule.mime_types)}',
                        }
                    )
                if upload.size == 0:
                    errors.append({"path": alias, "message": f'File "{upload.filename}" is empty'})
                elif upload.size > rule.max_size:
                    errors.append({"path": alias, "message": rule.size_error(upload.filename)})
        if errors:
            raise PayloadValidationError(errors)

    def _check_deletions(self, entry: Any, deletions: dict[str, list[str]]) -> None:
        for name, ids in deletions.items():
            known = {d["fileId"] for d in getattr(entry, name) or []}
            unknown = [i for i in ids if i not in known]
            if unknown:
                raise NotFoundError(
                    f"File ID(s) not found in {to_camel(name)}: {', '.join(unknown)}.",
                    errors={"path": to_camel(name), "fileIds": unknown},
                )

    def _check_totals(
        self, entry: Any, uploads: dict[str, list[Upload]], deletions: dict[str, list[str]]
    ) -> None:
        errors: list[dict[str, str]] = []
        for name, rule in self._spec.files.items():
            if not rule.multiple:
                continue
            remaining = len(getattr(entry, name) or []) - len(set(deletions.get(name, ())))
            if remaining + len(uploads.get(name, [])) > rule.max_count:
                alias = to_camel(name)
                errors.append({"path": alias, "message": f"{alias} accepts at most {rule.max_count} file(s)"})
        if errors:
            raise PayloadValidationError(errors)

    async def _store(self, uploads: dict[str, list[Upload]]) -> dict[str, list[dict[str, Any]]]:
        if not any(uploads.values()):
            return {}
        if self._storage is None:
            raise RuntimeError(f"file storage is not configured for {self._spec.slug}")
        stored: dict[str, list[dict[str, Any]]] = {}
        for name, items in uploads.items():
            stored[name] = [await self._storage.save(u) for u in items]
        return stored

    def _file_ids(self, entry: Any) -> Iterable[str]:
        for name, rule in self._spec.files.items():
            value = getattr(entry, name)
            if not value:
                continue
            if rule.multiple:
                yield from (d["fileId"] for d in value)
            else:
                yield value["fileId"]

    async def _discard(self, file_ids: Iterable[str]) -> None:
        if self._storage is None:
            return
        for file_id in file_ids:
            await self._storage.delete(file_id)


# --- Module Notes -----------------------------------------------------------
# Files are written before the row commits and removed again if the commit fails;
# replaced or deleted files are removed only after a successful commit.
