"""Domain models for shared photo sessions."""

from dataclasses import dataclass, field, replace
from datetime import datetime


@dataclass(frozen=True)
class PhotoRecord:
    """Represents one accepted upload within a session."""

    fname: str
    group_id: str
    size: int
    type: str


@dataclass(frozen=True)
class Session:
    """Represents a persisted photo session document."""

    id: str
    title: str
    photographer: str
    groups: list[str]
    created_at: datetime
    expires_at: datetime
    photo_count: int = 0
    photos: list[PhotoRecord] = field(default_factory=list)

    def is_expired(self, now: datetime) -> bool:
        """Return true once the expiry timestamp lies strictly in the past."""
        return self.expires_at < now

    def with_photo(self, record: PhotoRecord) -> "Session":
        """Return a copy with the record appended and the count bumped."""
        return replace(
            self,
            photo_count=self.photo_count + 1,
            photos=[*self.photos, record],
        )
