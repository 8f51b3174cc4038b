"""Supabase Storage-backed blob store."""

from dataclasses import dataclass
from typing import BinaryIO

from storage3.utils import StorageException
from supabase import Client

from selekt_api.domain.assets import StoredBlob
from selekt_api.services.sessions import BlobStore

_NOT_FOUND_MARKERS = ("not_found", "Object not found")


@dataclass
class SupabaseBlobStore(BlobStore):
    """Supabase implementation of the blob store over a single bucket."""

    client: Client
    bucket: str

    def put(
        self,
        key: str,
        body: bytes | BinaryIO,
        *,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Upload (or overwrite) an object with its content type and metadata."""
        # The storage client only accepts whole payloads.
        payload = body if isinstance(body, bytes) else body.read()
        file_options: dict[str, object] = {
            "content-type": content_type,
            "upsert": "true",
        }
        if metadata:
            file_options["metadata"] = metadata
        self.client.storage.from_(self.bucket).upload(key, payload, file_options)

    def get(self, key: str) -> StoredBlob | None:
        """Download an object and its headers, if present."""
        bucket = self.client.storage.from_(self.bucket)
        try:
            info = bucket.info(key)
            payload = bucket.download(key)
        except StorageException as exc:
            if _is_not_found(exc):
                return None
            raise
        content_type = info.get("content_type") or info.get("contentType")
        metadata = info.get("metadata") or {}
        return StoredBlob(
            chunks=[payload],
            content_type=content_type,
            metadata={str(name): str(value) for name, value in metadata.items()},
        )


def _is_not_found(exc: StorageException) -> bool:
    if str(getattr(exc, "status", "")) == "404":
        return True
    detail = exc.args[0] if exc.args else None
    if isinstance(detail, dict):
        if str(detail.get("statusCode", "")) == "404":
            return True
        text = f"{detail.get('error', '')} {detail.get('message', '')}"
    else:
        text = str(exc)
    return any(marker in text for marker in _NOT_FOUND_MARKERS)
