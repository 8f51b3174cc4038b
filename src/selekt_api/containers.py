"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from selekt_api.adapters.filesystem_blob_store import FilesystemBlobStore
from selekt_api.adapters.supabase_blob_store import SupabaseBlobStore
from selekt_api.config import Settings
from selekt_api.services.sessions import BlobStore, SessionStore


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    blob_store: BlobStore
    session_store: SessionStore


def build_blob_store(settings: Settings) -> BlobStore:
    """Create the blob store selected by `BLOB_BACKEND`."""
    if settings.blob_backend == "filesystem":
        return FilesystemBlobStore(settings.blob_root)
    if settings.blob_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase blob backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseBlobStore(client=client, bucket=settings.supabase_bucket)
    raise ValueError(f"Unknown blob backend: {settings.blob_backend}")


def build_container(
    settings: Settings | None = None, blob_store: BlobStore | None = None
) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    resolved_blob_store = blob_store or build_blob_store(resolved_settings)
    session_store = SessionStore(
        blob_store=resolved_blob_store,
        session_ttl=resolved_settings.session_ttl,
        max_photos=resolved_settings.max_photos_per_session,
        max_file_size_mb=resolved_settings.max_file_size_mb,
    )
    return AppContainer(
        settings=resolved_settings,
        blob_store=resolved_blob_store,
        session_store=session_store,
    )
