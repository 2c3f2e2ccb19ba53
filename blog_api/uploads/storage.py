"""
Upload sink: persist accepted images under `<storage_root>/images`.

Only png/jpeg uploads are kept. Anything else is dropped without an error,
so callers cannot tell "no file" from "file filtered out" (both are None).

Stored names are `<utc timestamp>-<random hex>_<original name>`; files are
opened in exclusive-create mode, so an existing upload is never overwritten.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from blog_api.core.config import IMAGES_DIRNAME, Settings
from blog_api.errors import BusinessError

ALLOWED_MIME_TYPES = frozenset({"image/png", "image/jpg", "image/jpeg"})
READ_CHUNK_BYTES = 1024 * 1024  # 1 MiB

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadDescriptor:
    stored_name: str
    original_name: str
    mime_type: str
    storage_path: str


def is_allowed(upload: UploadFile) -> bool:
    return (upload.content_type or "").strip().lower() in ALLOWED_MIME_TYPES


def safe_filename(original_name: str) -> str:
    name = PurePosixPath((original_name or "").replace("\\", "/")).name
    name = _UNSAFE_CHARS.sub("_", name).strip("._")
    return name or "upload"


def stored_name_for(original_name: str, *, now: datetime | None = None) -> str:
    now = now or datetime.now(timezone.utc)
    stamp = now.strftime("%Y%m%dT%H%M%S%fZ")
    return f"{stamp}-{uuid.uuid4().hex}_{safe_filename(original_name)}"


async def read_upload_bytes(upload: UploadFile, max_bytes: int) -> bytes:
    """
    Read the upload into memory, enforcing a maximum size.
    """
    buf = bytearray()

    while True:
        chunk = await upload.read(READ_CHUNK_BYTES)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise BusinessError(f"File too large. Max is {max_bytes} bytes.", status=413)

    return bytes(buf)


def _write_new_file(target: Path, data: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    with open(target, "xb") as fh:
        fh.write(data)


async def accept_upload(upload: UploadFile | None, settings: Settings) -> UploadDescriptor | None:
    """
    Store `upload` if it passes the media-type filter.

    Returns None when there is nothing to store. Storage failures propagate.
    """
    if upload is None or not upload.filename:
        return None

    if not is_allowed(upload):
        logger.info(
            "upload_rejected filename=%s content_type=%s",
            upload.filename,
            upload.content_type,
        )
        return None

    data = await read_upload_bytes(upload, settings.max_upload_bytes)
    stored_name = stored_name_for(upload.filename)
    await run_in_threadpool(_write_new_file, settings.upload_dir / stored_name, data)

    descriptor = UploadDescriptor(
        stored_name=stored_name,
        original_name=upload.filename,
        mime_type=(upload.content_type or "").lower(),
        storage_path=f"{IMAGES_DIRNAME}/{stored_name}",
    )
    logger.info("upload_stored path=%s size_bytes=%s", descriptor.storage_path, len(data))
    return descriptor


def _unlink(target: Path) -> None:
    target.unlink()


async def delete_image(path: str | None, settings: Settings) -> bool:
    """
    Best-effort removal of a stored image given its `images/...` path.

    Never raises; returns whether a file was actually removed.
    """
    raw = (path or "").strip().lstrip("/")
    if not raw:
        return False

    upload_dir = settings.upload_dir.resolve()
    target = (settings.storage_root / raw).resolve()
    if upload_dir not in target.parents:
        logger.warning("image_delete_refused path=%s", raw)
        return False

    try:
        await run_in_threadpool(_unlink, target)
    except OSError as exc:
        logger.warning("image_delete_failed path=%s error=%s", raw, exc)
        return False

    logger.info("image_deleted path=%s", raw)
    return True
