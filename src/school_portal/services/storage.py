"""
school_portal.services.storage

Local-directory storage for uploaded files.

Responsibilities:
- Persist uploads under a generated id and return a public descriptor.
- Delete stored files by id.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from school_portal.observability.logging import get_logger

log = get_logger(__name__)

PUBLIC_PREFIX = "/uploads"


@dataclass(frozen=True, slots=True)
class Upload:
    """
    An uploaded file already read into memory by the payload reader.
    """

    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)


class LocalFileStorage:
    def __init__(self, root: str | Path, *, public_base_url: str) -> None:
        self._root = Path(root)
        self._public_base_url = public_base_url.rstrip("/")

    @property
    def root(self) -> Path:
        return self._root

    def _path_for(self, file_id: str) -> Path:
        # File ids never contain separators; `name` strips anything a caller smuggles in.
        return self._root / Path(file_id).name

    def link_for(self, file_id: str) -> str:
        return f"{self._public_base_url}{PUBLIC_PREFIX}/{file_id}"

    async def save(self, upload: Upload) -> dict[str, Any]:
        suffix = Path(upload.filename).suffix.lower()
        file_id = f"{uuid.uuid4().hex}{suffix}"
        path = self._path_for(file_id)

        def _write() -> None:
            self._root.mkdir(parents=True, exist_ok=True)
            path.write_bytes(upload.data)

        await asyncio.to_thread(_write)
        log.info("storage.saved", file_id=file_id, size=upload.size)
        return {"fileId": file_id, "file": self.link_for(file_id)}

    async def delete(self, file_id: str) -> bool:
        path = self._path_for(file_id)

        def _remove() -> bool:
            try:
                path.unlink()
            except FileNotFoundError:
                return False
            return True

        removed = await asyncio.to_thread(_remove)
        if not removed:
            log.warning("storage.missing_file", file_id=file_id)
        return removed


# --- Module Notes -----------------------------------------------------------
# The app mounts `root` read-only at `/uploads`, which is what `link_for` points to.
