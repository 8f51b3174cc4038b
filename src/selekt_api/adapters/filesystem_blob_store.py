"""Local filesystem blob store."""

import json
import os
import shutil
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from selekt_api.domain.assets import StoredBlob
from selekt_api.services.sessions import BlobStore

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB


@dataclass
class FilesystemBlobStore(BlobStore):
    """Blob store keeping bodies and headers in two parallel directory trees."""

    root: Path

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root)

    def put(
        self,
        key: str,
        body: bytes | BinaryIO,
        *,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Write the body and its headers, each replaced atomically."""
        headers = {"content_type": content_type, "metadata": metadata or {}}
        self._replace(self._object_path(key), body)
        self._replace(
            self._headers_path(key), json.dumps(headers).encode("utf-8")
        )

    def get(self, key: str) -> StoredBlob | None:
        """Return a streaming view of the stored object, if present."""
        object_path = self._object_path(key)
        if not object_path.is_file():
            return None
        headers: dict[str, object] = {}
        headers_path = self._headers_path(key)
        if headers_path.is_file():
            headers = json.loads(headers_path.read_text(encoding="utf-8"))
        content_type = headers.get("content_type")
        metadata = headers.get("metadata")
        return StoredBlob(
            chunks=_iter_file(object_path),
            content_type=content_type if isinstance(content_type, str) else None,
            metadata=metadata if isinstance(metadata, dict) else {},
        )

    def _object_path(self, key: str) -> Path:
        return self.root / "objects" / key

    def _headers_path(self, key: str) -> Path:
        return self.root / "headers" / f"{key}.json"

    def _replace(self, target: Path, body: bytes | BinaryIO) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
        try:
            with os.fdopen(fd, "wb") as sink:
                if isinstance(body, bytes):
                    sink.write(body)
                else:
                    shutil.copyfileobj(body, sink, CHUNK_SIZE)
            os.replace(temp_name, target)
        except Exception:
            Path(temp_name).unlink(missing_ok=True)
            raise


def _iter_file(path: Path) -> Iterator[bytes]:
    with path.open("rb") as source:
        while True:
            chunk = source.read(CHUNK_SIZE)
            if not chunk:
                break
            yield chunk
