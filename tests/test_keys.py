"""Tests for the storage key namespace."""

import pytest

from selekt_api.domain.assets import AssetKind
from selekt_api.domain.errors import BadRequestError, NotFoundError
from selekt_api.services.keys import asset_key, meta_key, validate_filename


def test_keys_are_rooted_at_session() -> None:
    assert meta_key("Ab3xYz9Q") == "sessions/Ab3xYz9Q/meta.json"
    assert (
        asset_key("Ab3xYz9Q", "a.jpg", AssetKind.PHOTO)
        == "sessions/Ab3xYz9Q/photos/a.jpg"
    )
    assert (
        asset_key("Ab3xYz9Q", "a.jpg", AssetKind.THUMBNAIL)
        == "sessions/Ab3xYz9Q/thumbs/a.jpg"
    )


@pytest.mark.parametrize("session_id", ["", "../etc", "abc/def", "ab-cd", "ab cd"])
def test_non_alphanumeric_session_ids_are_missing(session_id: str) -> None:
    with pytest.raises(NotFoundError) as exc_info:
        meta_key(session_id)

    assert exc_info.value.message == "Not found"


@pytest.mark.parametrize(
    "filename", ["", ".", "..", "../meta.json", "a/b.jpg", "a\\b.jpg", "a\x00.jpg"]
)
def test_unsafe_filenames_are_rejected(filename: str) -> None:
    with pytest.raises(BadRequestError):
        asset_key("Ab3xYz9Q", filename, AssetKind.PHOTO)


def test_filename_length_is_capped() -> None:
    assert validate_filename("x" * 255) == "x" * 255
    with pytest.raises(BadRequestError):
        validate_filename("x" * 256)


def test_ordinary_filenames_pass_through() -> None:
    assert validate_filename("IMG 0001 (copy).JPG") == "IMG 0001 (copy).JPG"
