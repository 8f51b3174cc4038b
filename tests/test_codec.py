"""Tests for the session document codec."""

import json
from datetime import UTC, datetime, timedelta

import pytest

from selekt_api.domain.errors import CorruptMetadataError
from selekt_api.domain.sessions import PhotoRecord, Session
from selekt_api.services.codec import decode_session, encode_session, format_timestamp


def _session() -> Session:
    created = datetime(2026, 3, 1, 9, 30, 15, 123000, tzinfo=UTC)
    return Session(
        id="Ab3xYz9Q",
        title="Wedding",
        photographer="Sam",
        groups=["family", "friends"],
        created_at=created,
        expires_at=created + timedelta(days=7),
        photo_count=1,
        photos=[
            PhotoRecord(fname="a.jpg", group_id="family", size=1024, type="image/jpeg")
        ],
    )


def test_encode_uses_camel_case_wire_format() -> None:
    document = json.loads(encode_session(_session()))

    assert document == {
        "id": "Ab3xYz9Q",
        "title": "Wedding",
        "photographer": "Sam",
        "groups": ["family", "friends"],
        "createdAt": "2026-03-01T09:30:15.123Z",
        "expiresAt": "2026-03-08T09:30:15.123Z",
        "photoCount": 1,
        "photos": [
            {"fname": "a.jpg", "groupId": "family", "size": 1024, "type": "image/jpeg"}
        ],
    }


def test_decode_restores_every_field() -> None:
    session = _session()

    assert decode_session(encode_session(session)) == session


def test_decode_accepts_documents_with_defaults_missing() -> None:
    raw = json.dumps(
        {
            "id": "Ab3xYz9Q",
            "createdAt": "2026-03-01T09:30:15.000Z",
            "expiresAt": "2026-03-08T09:30:15.000Z",
        }
    ).encode()

    session = decode_session(raw)

    assert session.title == ""
    assert session.groups == []
    assert session.photo_count == 0
    assert session.photos == []


@pytest.mark.parametrize(
    "raw",
    [
        b"",
        b"not json",
        b"\xff\xfe",
        b"[]",
        b'{"id": "x"}',
        b'{"id": "x", "createdAt": "2026-03-01T09:30:15", '
        b'"expiresAt": "2026-03-08T09:30:15"}',
        b'{"id": "x", "createdAt": "2026-03-01T09:30:15Z", '
        b'"expiresAt": "2026-03-08T09:30:15Z", "photoCount": 2, "photos": []}',
    ],
)
def test_decode_rejects_malformed_documents(raw: bytes) -> None:
    with pytest.raises(CorruptMetadataError):
        decode_session(raw)


def test_format_timestamp_normalizes_to_utc() -> None:
    value = datetime(2026, 3, 1, 12, 0, tzinfo=UTC).astimezone(
        datetime.now().astimezone().tzinfo
    )

    assert format_timestamp(value) == "2026-03-01T12:00:00.000Z"
