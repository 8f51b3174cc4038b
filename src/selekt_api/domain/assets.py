"""Domain models for stored binary assets."""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

DEFAULT_CONTENT_TYPE = "image/jpeg"
ASSET_CACHE_CONTROL = "public, max-age=86400"


class AssetKind(str, Enum):
    """Kinds of binary assets kept per photo."""

    PHOTO = "photo"
    THUMBNAIL = "thumbnail"


@dataclass(frozen=True)
class StoredBlob:
    """A blob read back from storage with its headers."""

    chunks: Iterable[bytes]
    content_type: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)

    def read(self) -> bytes:
        """Drain the body into memory."""
        return b"".join(self.chunks)


@dataclass(frozen=True)
class AssetResponse:
    """An asset body plus the headers the HTTP layer should apply."""

    chunks: Iterable[bytes]
    content_type: str
    cache_control: str = ASSET_CACHE_CONTROL
