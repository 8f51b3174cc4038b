"""JSON codec for the stored session document."""

from datetime import UTC, datetime

from pydantic import (
    AwareDatetime,
    BaseModel,
    ConfigDict,
    ValidationError,
    field_serializer,
    model_validator,
)
from pydantic.alias_generators import to_camel

from selekt_api.domain.errors import CorruptMetadataError
from selekt_api.domain.sessions import PhotoRecord, Session


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as UTC ISO-8601 with millisecond precision."""
    rendered = value.astimezone(UTC).isoformat(timespec="milliseconds")
    return rendered.replace("+00:00", "Z")


class _Document(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class PhotoDocument(_Document):
    """Wire shape of a photo record."""

    fname: str
    group_id: str = ""
    size: int
    type: str = ""


class SessionDocument(_Document):
    """Wire shape of `sessions/{id}/meta.json`."""

    id: str
    title: str = ""
    photographer: str = ""
    groups: list[str] = []
    created_at: AwareDatetime
    expires_at: AwareDatetime
    photo_count: int = 0
    photos: list[PhotoDocument] = []

    @model_validator(mode="after")
    def _check_photo_count(self) -> "SessionDocument":
        if self.photo_count != len(self.photos):
            raise ValueError("photoCount does not match the photo list")
        return self

    @field_serializer("created_at", "expires_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)


def session_to_document(session: Session) -> SessionDocument:
    """Convert a domain session into its wire model."""
    return SessionDocument(
        id=session.id,
        title=session.title,
        photographer=session.photographer,
        groups=list(session.groups),
        created_at=session.created_at,
        expires_at=session.expires_at,
        photo_count=session.photo_count,
        photos=[
            PhotoDocument(
                fname=photo.fname,
                group_id=photo.group_id,
                size=photo.size,
                type=photo.type,
            )
            for photo in session.photos
        ],
    )


def encode_session(session: Session) -> bytes:
    """Serialize a session to JSON bytes."""
    return session_to_document(session).model_dump_json(by_alias=True).encode()


def decode_session(raw: bytes) -> Session:
    """Parse JSON bytes into a session, raising on malformed documents."""
    try:
        document = SessionDocument.model_validate_json(raw)
    except ValidationError as exc:
        raise CorruptMetadataError("Session metadata is corrupt") from exc
    return Session(
        id=document.id,
        title=document.title,
        photographer=document.photographer,
        groups=document.groups,
        created_at=document.created_at,
        expires_at=document.expires_at,
        photo_count=document.photo_count,
        photos=[
            PhotoRecord(
                fname=photo.fname,
                group_id=photo.group_id,
                size=photo.size,
                type=photo.type,
            )
            for photo in document.photos
        ],
    )
