"""Avatar upload validation and storage."""
from __future__ import annotations

import logging
import secrets
import time
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from arboretum.core.config import get_settings
from arboretum.core.errors import ValidationError

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"jpeg", "jpg", "png", "gif"})


def _is_allowed_image(filename: str, content_type: str | None) -> bool:
    extension = Path(filename).suffix.lower().lstrip(".")
    mime = (content_type or "").lower()
    if not mime.startswith("image/"):
        return False
    return extension in ALLOWED_IMAGE_TYPES and mime.split("/", 1)[1] in ALLOWED_IMAGE_TYPES


def _write_file(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)


async def save_avatar(upload: UploadFile | None, user_id: int) -> str:
    """Validate and store an uploaded avatar, returning its public path."""
    settings = get_settings()
    if upload is None or not upload.filename:
        raise ValidationError("No file uploaded or unsupported format")
    if not _is_allowed_image(upload.filename, upload.content_type):
        raise ValidationError("Only images are allowed: jpeg, jpg, png, gif")

    data = await upload.read(settings.avatar_max_bytes + 1)
    if len(data) > settings.avatar_max_bytes:
        limit_mb = settings.avatar_max_bytes / (1024 * 1024)
        raise ValidationError(f"File is too large (limit {limit_mb:g} MB)")
    if not data:
        raise ValidationError("Uploaded file is empty")

    extension = Path(upload.filename).suffix.lower()
    filename = f"{user_id}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{extension}"
    await run_in_threadpool(_write_file, settings.avatar_dir / filename, data)
    logger.debug("Stored avatar %s (%d bytes)", filename, len(data))
    return f"{settings.avatar_url_prefix.rstrip('/')}/avatars/{filename}"


async def discard_avatar(public_path: str) -> None:
    """Remove a stored avatar file, e.g. when recording it in the database failed."""
    settings = get_settings()
    filename = Path(public_path).name
    await run_in_threadpool((settings.avatar_dir / filename).unlink, missing_ok=True)
