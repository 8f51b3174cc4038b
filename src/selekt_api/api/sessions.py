"""Session API endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.datastructures import FormData, UploadFile

from selekt_api.api.models import (
    CreateSessionRequest,
    CreateSessionResponse,
    UploadResponse,
)
from selekt_api.domain.assets import AssetKind, AssetResponse
from selekt_api.services.codec import format_timestamp, session_to_document
from selekt_api.services.sessions import PhotoFile

if TYPE_CHECKING:
    from selekt_api.containers import AppContainer
    from selekt_api.services.sessions import SessionStore

router = APIRouter(prefix="/api/session", tags=["sessions"])


def _session_store(request: Request) -> SessionStore:
    container: AppContainer = request.app.state.container
    return container.session_store


@router.post("")
async def create_session(
    payload: CreateSessionRequest, request: Request
) -> CreateSessionResponse:
    """Create a new photo session."""
    created = _session_store(request).create_session(
        title=payload.title,
        photographer=payload.photographer,
        groups=payload.groups,
    )
    return CreateSessionResponse(
        sessionId=created.session_id,
        expiresAt=format_timestamp(created.expires_at),
    )


@router.get("/{session_id}")
async def get_session(session_id: str, request: Request) -> JSONResponse:
    """Return the full session document."""
    session = _session_store(request).get_session(session_id)
    document = session_to_document(session)
    return JSONResponse(document.model_dump(mode="json", by_alias=True))


@router.post("/{session_id}/upload")
async def upload_photo(session_id: str, request: Request) -> UploadResponse:
    """Accept a multipart photo upload with an optional thumbnail."""
    container: AppContainer = request.app.state.container
    async with request.form(
        max_part_size=container.settings.max_file_size_bytes
    ) as form:
        file = form.get("file")
        photo = None
        if isinstance(file, UploadFile):
            photo = PhotoFile(
                content=file.file,
                size=_upload_size(file),
                filename=file.filename,
                content_type=file.content_type,
            )
        thumb = form.get("thumb")
        result = container.session_store.upload_photo(
            session_id,
            photo,
            filename=_form_text(form, "fname"),
            group_id=_form_text(form, "groupId"),
            thumbnail=thumb.file if isinstance(thumb, UploadFile) else thumb,
        )
    return UploadResponse(
        ok=result.ok, fname=result.fname, photoCount=result.photo_count
    )


@router.get("/{session_id}/photo/{fname}")
async def get_photo(session_id: str, fname: str, request: Request) -> StreamingResponse:
    """Stream an original photo."""
    asset = _session_store(request).fetch_asset(session_id, fname, AssetKind.PHOTO)
    return _stream(asset)


@router.get("/{session_id}/thumb/{fname}")
async def get_thumbnail(
    session_id: str, fname: str, request: Request
) -> StreamingResponse:
    """Stream a thumbnail, or the original photo when none was uploaded."""
    asset = _session_store(request).fetch_asset(
        session_id, fname, AssetKind.THUMBNAIL
    )
    return _stream(asset)


def _stream(asset: AssetResponse) -> StreamingResponse:
    return StreamingResponse(
        asset.chunks,
        media_type=asset.content_type,
        headers={"Cache-Control": asset.cache_control},
    )


def _form_text(form: FormData, name: str) -> str | None:
    value = form.get(name)
    return value if isinstance(value, str) and value else None


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size
