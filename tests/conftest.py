"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import BinaryIO

import pytest
from fastapi.testclient import TestClient

from selekt_api.api.app import create_app
from selekt_api.config import Settings
from selekt_api.containers import AppContainer
from selekt_api.domain.assets import StoredBlob
from selekt_api.services.sessions import BlobStore, SessionStore

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=UTC)


@dataclass
class StoredObject:
    body: bytes
    content_type: str
    metadata: dict[str, str]


@dataclass
class InMemoryBlobStore(BlobStore):
    """In-memory blob store for tests."""

    objects: dict[str, StoredObject] = field(default_factory=dict)
    puts: list[str] = field(default_factory=list)
    fail_on: set[str] = field(default_factory=set)

    def put(
        self,
        key: str,
        body: bytes | BinaryIO,
        *,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        if any(marker in key for marker in self.fail_on):
            raise RuntimeError(f"storage unavailable for {key}")
        payload = body if isinstance(body, bytes) else body.read()
        self.objects[key] = StoredObject(payload, content_type, dict(metadata or {}))
        self.puts.append(key)

    def get(self, key: str) -> StoredBlob | None:
        stored = self.objects.get(key)
        if stored is None:
            return None
        return StoredBlob(
            chunks=[stored.body],
            content_type=stored.content_type,
            metadata=dict(stored.metadata),
        )


@dataclass
class FakeClock:
    """Manually advanced clock."""

    now: datetime = NOW

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now = self.now + delta


class SequentialIds:
    """Deterministic session id factory."""

    def __init__(self, *ids: str) -> None:
        self._ids = list(ids)

    def __call__(self) -> str:
        return self._ids.pop(0)


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        session_ttl_days=7,
        max_photos_per_session=3,
        max_file_size_mb=1,
        blob_backend="filesystem",
        blob_root=str(tmp_path / "blobs"),
    )


@pytest.fixture
def blob_store() -> InMemoryBlobStore:
    return InMemoryBlobStore()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(
    settings: Settings, blob_store: InMemoryBlobStore, clock: FakeClock
) -> SessionStore:
    return SessionStore(
        blob_store=blob_store,
        session_ttl=settings.session_ttl,
        max_photos=settings.max_photos_per_session,
        max_file_size_mb=settings.max_file_size_mb,
        clock=clock,
    )


@pytest.fixture
def container(
    settings: Settings,
    blob_store: InMemoryBlobStore,
    session_store: SessionStore,
) -> AppContainer:
    return AppContainer(
        settings=settings,
        blob_store=blob_store,
        session_store=session_store,
    )


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))
