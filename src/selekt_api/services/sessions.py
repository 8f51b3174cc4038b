"""Session store layered over a key-addressed blob store."""

import base64
import logging
import re
import secrets
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import BinaryIO, Protocol

from selekt_api.domain.assets import (
    DEFAULT_CONTENT_TYPE,
    AssetKind,
    AssetResponse,
    StoredBlob,
)
from selekt_api.domain.errors import (
    BadRequestError,
    NotFoundError,
    PayloadTooLargeError,
    QuotaExceededError,
    SessionExpiredError,
)
from selekt_api.domain.sessions import PhotoRecord, Session
from selekt_api.services.codec import decode_session, encode_session, format_timestamp
from selekt_api.services.keys import asset_key, meta_key

logger = logging.getLogger(__name__)

SESSION_ID_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZabcdefghjkmnpqrstuvwxyz23456789"
SESSION_ID_LENGTH = 8

_BYTES_PER_MB = 1024 * 1024
_METADATA_CONTENT_TYPE = "application/json"
_DATA_URL_PREFIX = re.compile(r"^data:image/\w+;base64,")

Thumbnail = bytes | str | BinaryIO


class BlobStore(Protocol):
    """Key-addressed object storage with per-object headers."""

    def put(
        self,
        key: str,
        body: bytes | BinaryIO,
        *,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Store a body under the key, replacing any previous object."""

    def get(self, key: str) -> StoredBlob | None:
        """Return the object stored under the key, if present."""


@dataclass(frozen=True)
class PhotoFile:
    """An uploaded file as handed over by the transport layer."""

    content: BinaryIO
    size: int
    filename: str | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class CreatedSession:
    """Identifier and expiry of a freshly created session."""

    session_id: str
    expires_at: datetime


@dataclass(frozen=True)
class UploadResult:
    """Outcome of an accepted upload."""

    fname: str
    photo_count: int
    ok: bool = True


def utcnow() -> datetime:
    """Return the current UTC time truncated to milliseconds."""
    now = datetime.now(tz=UTC)
    return now.replace(microsecond=now.microsecond - now.microsecond % 1000)


def generate_session_id(length: int = SESSION_ID_LENGTH) -> str:
    """Draw a random session id from the unambiguous alphabet."""
    return "".join(secrets.choice(SESSION_ID_ALPHABET) for _ in range(length))


def decode_data_url(value: str) -> bytes:
    """Decode an inline base64 image, with or without a data URL prefix.

    Embedded whitespace is ignored and missing padding is restored, so
    line-wrapped and unpadded payloads decode like they do in browsers.
    """
    payload = "".join(_DATA_URL_PREFIX.sub("", value, count=1).split())
    payload += "=" * (-len(payload) % 4)
    try:
        return base64.b64decode(payload, validate=True)
    except ValueError as exc:
        raise BadRequestError("Thumbnail is not valid base64") from exc


def _thumbnail_body(thumbnail: Thumbnail | None) -> bytes | BinaryIO | None:
    if isinstance(thumbnail, str):
        return decode_data_url(thumbnail) if thumbnail else None
    if isinstance(thumbnail, bytes):
        return thumbnail or None
    return thumbnail


@dataclass
class SessionStore:
    """Creates, reads and appends to sessions kept entirely in blob storage.

    The store holds no state of its own. Every call reads the session
    document from the blob store and, for writes, rewrites it in full.
    """

    blob_store: BlobStore
    session_ttl: timedelta = timedelta(days=7)
    max_photos: int = 50
    max_file_size_mb: int = 25
    clock: Callable[[], datetime] = utcnow
    id_factory: Callable[[], str] = generate_session_id

    @property
    def max_file_size_bytes(self) -> int:
        """Per-file upload ceiling in bytes."""
        return self.max_file_size_mb * _BYTES_PER_MB

    def create_session(
        self,
        title: str | None = None,
        photographer: str | None = None,
        groups: list[str] | None = None,
    ) -> CreatedSession:
        """Create an empty session and return its id and expiry."""
        now = self.clock()
        session = Session(
            id=self.id_factory(),
            title=title or "",
            photographer=photographer or "",
            groups=list(groups or []),
            created_at=now,
            expires_at=now + self.session_ttl,
        )
        self._write_session(session)
        logger.info(
            "Session created",
            extra={
                "session_id": session.id,
                "expires_at": format_timestamp(session.expires_at),
            },
        )
        return CreatedSession(session_id=session.id, expires_at=session.expires_at)

    def get_session(self, session_id: str) -> Session:
        """Return a session that exists and has not expired."""
        session = self._load_session(session_id)
        if session.is_expired(self.clock()):
            raise SessionExpiredError("Session expired")
        return session

    def upload_photo(
        self,
        session_id: str,
        file: PhotoFile | None,
        *,
        filename: str | None = None,
        group_id: str | None = None,
        thumbnail: Thumbnail | None = None,
    ) -> UploadResult:
        """Store a photo (and optional thumbnail) and record it in the session.

        Expiry is not checked here; holders of the id may keep uploading.
        """
        session = self._load_session(session_id)
        if session.photo_count >= self.max_photos:
            raise QuotaExceededError(f"Maximum {self.max_photos} photos per session")
        if file is not None and file.size > self.max_file_size_bytes:
            raise PayloadTooLargeError(
                f"File too large (max {self.max_file_size_mb}MB)"
            )
        if file is None:
            raise BadRequestError("No file provided")

        fname = filename or file.filename or ""
        photo_key = asset_key(session_id, fname, AssetKind.PHOTO)
        thumb_key = asset_key(session_id, fname, AssetKind.THUMBNAIL)
        thumb_body = _thumbnail_body(thumbnail)
        group = group_id or ""

        self.blob_store.put(
            photo_key,
            file.content,
            content_type=file.content_type or DEFAULT_CONTENT_TYPE,
            metadata={"groupId": group, "originalName": fname},
        )
        if thumb_body is not None:
            self.blob_store.put(
                thumb_key, thumb_body, content_type=DEFAULT_CONTENT_TYPE
            )

        # Last writer wins: a concurrent upload between the load above and
        # this write loses its record.
        updated = session.with_photo(
            PhotoRecord(
                fname=fname,
                group_id=group,
                size=file.size,
                type=file.content_type or "",
            )
        )
        self._write_session(updated)
        logger.info(
            "Photo uploaded",
            extra={
                "session_id": session_id,
                "fname": fname,
                "size": file.size,
                "has_thumbnail": thumb_body is not None,
                "photo_count": updated.photo_count,
            },
        )
        return UploadResult(fname=fname, photo_count=updated.photo_count)

    def fetch_asset(
        self, session_id: str, filename: str, kind: AssetKind
    ) -> AssetResponse:
        """Return a photo or thumbnail; thumbnails fall back to the photo."""
        blob = None
        if kind is AssetKind.THUMBNAIL:
            blob = self.blob_store.get(
                asset_key(session_id, filename, AssetKind.THUMBNAIL)
            )
        if blob is None:
            blob = self.blob_store.get(asset_key(session_id, filename, AssetKind.PHOTO))
        if blob is None:
            raise NotFoundError("Photo not found")
        return AssetResponse(
            chunks=blob.chunks,
            content_type=blob.content_type or DEFAULT_CONTENT_TYPE,
        )

    def _load_session(self, session_id: str) -> Session:
        blob = self.blob_store.get(meta_key(session_id))
        if blob is None:
            raise NotFoundError("Session not found")
        return decode_session(blob.read())

    def _write_session(self, session: Session) -> None:
        self.blob_store.put(
            meta_key(session.id),
            encode_session(session),
            content_type=_METADATA_CONTENT_TYPE,
        )
