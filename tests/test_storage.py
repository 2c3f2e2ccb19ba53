"""
Upload sink: filtering, naming, and no-overwrite guarantees.
"""

import asyncio
import io
from datetime import datetime, timezone

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from blog_api.errors import BusinessError
from blog_api.uploads import storage


def _upload(data: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.parametrize("content_type", ["image/png", "image/jpg", "image/jpeg", "IMAGE/PNG"])
def test_allowed_media_types(content_type):
    assert storage.is_allowed(_upload(b"", "a", content_type))


@pytest.mark.parametrize("content_type", ["application/pdf", "image/gif", "text/plain", ""])
def test_rejected_media_types(content_type):
    assert not storage.is_allowed(_upload(b"", "a", content_type))


@pytest.mark.parametrize(
    "original, expected",
    [
        ("photo.png", "photo.png"),
        ("my holiday photo.png", "my_holiday_photo.png"),
        ("../../etc/passwd", "passwd"),
        ("C:\\Users\\me\\cat.jpg", "cat.jpg"),
        ("", "upload"),
    ],
)
def test_safe_filename(original, expected):
    assert storage.safe_filename(original) == expected


def test_same_name_same_instant_gets_distinct_names():
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)

    first = storage.stored_name_for("a.png", now=now)
    second = storage.stored_name_for("a.png", now=now)

    assert first != second
    assert first.startswith("20260101T000000000000Z-")
    assert first.endswith("_a.png")


def test_existing_file_is_never_overwritten(tmp_path):
    target = tmp_path / "images" / "taken.png"
    storage._write_new_file(target, b"first")

    with pytest.raises(FileExistsError):
        storage._write_new_file(target, b"second")
    assert target.read_bytes() == b"first"


def test_accept_upload_returns_descriptor(settings):
    descriptor = asyncio.run(storage.accept_upload(_upload(b"png", "cover.png", "image/png"), settings))

    assert descriptor is not None
    assert descriptor.original_name == "cover.png"
    assert descriptor.mime_type == "image/png"
    assert descriptor.storage_path == f"images/{descriptor.stored_name}"
    assert (settings.upload_dir / descriptor.stored_name).read_bytes() == b"png"


def test_accept_upload_drops_filtered_and_missing(settings):
    settings.upload_dir.mkdir(parents=True)
    assert asyncio.run(storage.accept_upload(None, settings)) is None
    assert asyncio.run(storage.accept_upload(_upload(b"%PDF", "a.pdf", "application/pdf"), settings)) is None
    assert list(settings.upload_dir.iterdir()) == []


def test_concurrent_uploads_with_same_name_keep_both(settings, monkeypatch):
    frozen = datetime(2026, 1, 1, tzinfo=timezone.utc)
    real_stored_name_for = storage.stored_name_for
    monkeypatch.setattr(storage, "stored_name_for", lambda name: real_stored_name_for(name, now=frozen))

    async def both():
        return await asyncio.gather(
            storage.accept_upload(_upload(b"one", "same.png", "image/png"), settings),
            storage.accept_upload(_upload(b"two", "same.png", "image/png"), settings),
        )

    first, second = asyncio.run(both())

    assert first.stored_name != second.stored_name
    contents = sorted(p.read_bytes() for p in settings.upload_dir.iterdir())
    assert contents == [b"one", b"two"]


def test_oversized_upload_raises_business_error(settings):
    big = _upload(b"x" * (settings.max_upload_bytes + 1), "big.png", "image/png")

    with pytest.raises(BusinessError) as excinfo:
        asyncio.run(storage.accept_upload(big, settings))
    assert excinfo.value.status == 413


def test_delete_image(settings):
    settings.upload_dir.mkdir(parents=True)
    target = settings.upload_dir / "old.png"
    target.write_bytes(b"old")

    assert asyncio.run(storage.delete_image("images/old.png", settings)) is True
    assert not target.exists()
    assert asyncio.run(storage.delete_image("images/old.png", settings)) is False
    assert asyncio.run(storage.delete_image(None, settings)) is False
    assert asyncio.run(storage.delete_image("../outside.png", settings)) is False
