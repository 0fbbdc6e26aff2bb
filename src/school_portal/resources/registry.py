"""
school_portal.resources.registry

Declarative description of a content resource.

Responsibilities:
- Describe a resource once (`ResourceSpec`): model, payload fields, upload rules,
  uniqueness, categories, selection criteria and routing flags.
- Derive the create, update and query schemas from that single declaration.

Field declarations map attribute names to annotations. A plain annotation is a
required field; a `(annotation, default)` tuple is optional on create. API names
are the camelCase aliases of the attribute names.
"""

from __future__ import annotations

import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from functools import cached_property
from typing import Annotated, Any, Optional, get_args, get_origin

from pydantic import BaseModel, ConfigDict, create_model
from pydantic.alias_generators import to_camel, to_pascal

from school_portal.errors import PayloadValidationError
from school_portal.resources.fields import QueryDate

JSON = "application/json"
FORM_DATA = "multipart/form-data"

MAX_FILE_SIZE = 5 * 1024 * 1024
IMAGE_TYPES = ("image/jpeg", "image/jpg", "image/png", "image/gif")
DOCUMENT_TYPES = (*IMAGE_TYPES, "application/pdf")


class ResourceSchema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        str_strip_whitespace=True,
    )


@dataclass(frozen=True, slots=True)
class FileRule:
    mime_types: tuple[str, ...] = IMAGE_TYPES
    max_size: int = MAX_FILE_SIZE
    min_count: int = 1
    max_count: int = 1

    @property
    def multiple(self) -> bool:
        return self.max_count > 1

    def size_error(self, filename: str) -> str:
        return f'File "{filename}" exceeds {self.max_size // (1024 * 1024)} MB'


def _unwrap(annotation: Any) -> Any:
    while get_origin(annotation) is Annotated:
        annotation = get_args(annotation)[0]
    return annotation


def _query_annotation(annotation: Any) -> Any:
    # Searches are loose: text matches as a substring, timestamps by whole day.
    base = _unwrap(annotation)
    if base is datetime:
        return QueryDate
    if base in (bool, int, float):
        return base
    return str


@dataclass(frozen=True)
class ResourceSpec:
    slug: str
    label: str
    model: type
    fields: Mapping[str, Any]
    unique: tuple[tuple[str, ...], ...] = ()
    display_field: str | None = None
    searchable: tuple[str, ...] | None = None
    categories: tuple[str, ...] = ()
    files: Mapping[str, FileRule] = field(default_factory=dict)
    content_types: tuple[str, ...] = (JSON,)
    selection: Mapping[str, bool] | None = None
    public_read: bool = True
    singleton: bool = False
    generic_routes: bool = True

    # -- derived names ---------------------------------------------------------

    @property
    def name(self) -> str:
        return self.slug.replace("/", "_").replace("-", "_")

    @property
    def title_label(self) -> str:
        return self.label[:1].upper() + self.label[1:]

    @property
    def categorized(self) -> bool:
        return bool(self.categories)

    @cached_property
    def file_aliases(self) -> dict[str, str]:
        return {to_camel(name): name for name in self.files}

    @cached_property
    def delete_keys(self) -> dict[str, str]:
        # `files` -> `deleteFiles`, `images` -> `deleteImages`.
        return {f"delete{to_pascal(name)}": name for name, rule in self.files.items() if rule.multiple}

    @cached_property
    def list_keys(self) -> frozenset[str]:
        keys = {
            to_camel(name)
            for name, ann in self.fields.items()
            if get_origin(_unwrap(ann[0] if isinstance(ann, tuple) else ann)) is list
        }
        return frozenset(keys | set(self.delete_keys))

    @cached_property
    def selection_criteria(self) -> dict[str, bool]:
        if self.selection is not None:
            return dict(self.selection)
        names = ["id"]
        if self.categorized:
            names.append("category")
        names.extend(self.fields)
        names.extend(self.files)
        names.extend(["created_at", "updated_at"])
        return {n: True for n in names}

    # -- derived schemas -------------------------------------------------------

    def _split(self, declared: Any) -> tuple[Any, Any]:
        if isinstance(declared, tuple):
            return declared[0], declared[1]
        return declared, ...

    @cached_property
    def create_schema(self) -> type[ResourceSchema]:
        definitions = {}
        for name, declared in self.fields.items():
            annotation, default = self._split(declared)
            if default is None:
                annotation = Optional[annotation]
            definitions[name] = (annotation, default)
        return create_model(
            f"{to_pascal(self.name)}Create", __base__=ResourceSchema, **definitions
        )

    @cached_property
    def update_schema(self) -> type[ResourceSchema]:
        definitions = {
            name: (Optional[self._split(declared)[0]], None)
            for name, declared in self.fields.items()
        }
        if self.categorized:
            # Updates may move an entry to another category; `check_category` validates it.
            definitions["category"] = (Optional[str], None)
        return create_model(
            f"{to_pascal(self.name)}Update", __base__=ResourceSchema, **definitions
        )

    @cached_property
    def query_schema(self) -> type[ResourceSchema]:
        searchable = self.searchable if self.searchable is not None else tuple(
            name
            for name, declared in self.fields.items()
            if get_origin(_unwrap(self._split(declared)[0])) is not list
        )
        definitions: dict[str, Any] = {
            "id": (Optional[uuid.UUID], None),
            "created_at": (Optional[QueryDate], None),
            "updated_at": (Optional[QueryDate], None),
        }
        for name in searchable:
            annotation = _query_annotation(self._split(self.fields[name])[0])
            definitions[name] = (Optional[annotation], None)
        return create_model(
            f"{to_pascal(self.name)}Query", __base__=ResourceSchema, **definitions
        )

    # -- checks ----------------------------------------------------------------

    def check_category(self, category: str | None) -> None:
        if not self.categorized:
            return
        if category not in self.categories:
            allowed = ", ".join(self.categories)
            raise PayloadValidationError(
                [{"path": "category", "message": f'Invalid category "{category}". Allowed: {allowed}.'}]
            )


# --- Module Notes -----------------------------------------------------------
# Routes are generated from these declarations in `api.routers.resources`; a new
# resource needs a model and a catalog entry, nothing else.
