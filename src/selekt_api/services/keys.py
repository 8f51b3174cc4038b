"""Storage key namespace for session documents and assets."""

import re

from selekt_api.domain.assets import AssetKind
from selekt_api.domain.errors import BadRequestError, NotFoundError

_SESSION_ID_PATTERN = re.compile(r"[A-Za-z0-9]+")
_MAX_FILENAME_LENGTH = 255
_FORBIDDEN_FILENAME_CHARS = ("/", "\\", "\x00")
_ASSET_FOLDERS = {
    AssetKind.PHOTO: "photos",
    AssetKind.THUMBNAIL: "thumbs",
}


def session_root(session_id: str) -> str:
    """Return the key prefix owning every object of a session.

    Ids outside the generator's alphabet can never have been issued. They
    get the same answer as a path that matches no route.
    """
    if not _SESSION_ID_PATTERN.fullmatch(session_id):
        raise NotFoundError("Not found")
    return f"sessions/{session_id}"


def meta_key(session_id: str) -> str:
    """Return the key of the session document."""
    return f"{session_root(session_id)}/meta.json"


def asset_key(session_id: str, filename: str, kind: AssetKind) -> str:
    """Return the key of a photo or thumbnail."""
    folder = _ASSET_FOLDERS[kind]
    return f"{session_root(session_id)}/{folder}/{validate_filename(filename)}"


def validate_filename(filename: str) -> str:
    """Return the filename unchanged if it is safe to embed in a key."""
    if not filename or filename in {".", ".."}:
        raise BadRequestError("Invalid filename")
    if len(filename) > _MAX_FILENAME_LENGTH:
        raise BadRequestError("Invalid filename")
    if any(char in filename for char in _FORBIDDEN_FILENAME_CHARS):
        raise BadRequestError("Invalid filename")
    return filename
