"""Request and response models for the session API."""

from pydantic import BaseModel


class CreateSessionRequest(BaseModel):
    """Body of `POST /api/session`."""

    title: str | None = None
    photographer: str | None = None
    groups: list[str] | None = None


class CreateSessionResponse(BaseModel):
    """Body returned for a newly created session."""

    sessionId: str  # noqa: N815
    expiresAt: str  # noqa: N815


class UploadResponse(BaseModel):
    """Body returned for an accepted upload."""

    ok: bool
    fname: str
    photoCount: int  # noqa: N815
