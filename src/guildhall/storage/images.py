"""Local storage for uploaded server images.

Images are written to ``<cwd>/<public_dir>/images`` and served by the API
under ``/images``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol
from uuid import uuid4

import aiofiles

from ..config import Settings
from ..config import settings as default_settings
from ..logging import get_logger
from ..services.errors import ValidationError

logger = get_logger(__name__)

IMAGES_SUBDIR = "images"
CHUNK_SIZE = 64 * 1024


class UploadedFile(Protocol):
    """The part of an uploaded file the handler relies on (Starlette ``UploadFile``)."""

    filename: str | None

    async def read(self, size: int = -1) -> bytes: ...


def get_images_dir(settings: Settings | None = None) -> Path:
    """Absolute directory that uploaded images are written to."""
    settings = settings or default_settings
    return Path.cwd() / settings.public_dir / IMAGES_SUBDIR


def sanitize_filename(filename: str | None) -> str:
    """Reduce a client supplied filename to its base name."""
    name = Path((filename or "").replace("\\", "/")).name.strip()
    if not name or name in {".", ".."}:
        raise ValidationError("Image filename is required")
    return name


def build_unique_filename(filename: str) -> str:
    return f"{uuid4()}_{filename}"


def build_image_url(unique_filename: str, settings: Settings | None = None) -> str:
    settings = settings or default_settings
    return f"{settings.app_url}/{IMAGES_SUBDIR}/{unique_filename}"


async def store_image_and_get_url(file: UploadedFile, settings: Settings | None = None) -> str:
    """Stream an uploaded image to the public image directory and return its URL.

    The write completes before the URL is returned. Oversized uploads and
    disallowed extensions raise ``ValidationError``; a partially written file
    is removed on any failure.
    """
    settings = settings or default_settings

    filename = sanitize_filename(file.filename)
    extension = Path(filename).suffix.lower()
    if extension not in settings.allowed_image_extensions:
        allowed = ", ".join(settings.allowed_image_extensions)
        raise ValidationError(
            f"File extension '{extension}' is not allowed. Allowed extensions: {allowed}"
        )

    unique_filename = build_unique_filename(filename)
    images_dir = get_images_dir(settings)
    image_path = images_dir / unique_filename
    image_url = build_image_url(unique_filename, settings)

    images_dir.mkdir(parents=True, exist_ok=True)

    written = 0
    try:
        async with aiofiles.open(image_path, "wb") as out:
            while chunk := await file.read(CHUNK_SIZE):
                written += len(chunk)
                if written > settings.max_upload_size:
                    raise ValidationError(
                        f"Image exceeds maximum allowed size of {settings.max_upload_size} bytes"
                    )
                await out.write(chunk)
    except Exception:
        image_path.unlink(missing_ok=True)
        raise

    logger.info("Image stored", filename=unique_filename, size=written)
    return image_url


def remove_image(image_url: str, settings: Settings | None = None) -> None:
    """Delete an image previously stored by ``store_image_and_get_url``.

    URLs not pointing into the image directory are ignored.
    """
    settings = settings or default_settings

    prefix = build_image_url("", settings)
    if not image_url.startswith(prefix):
        return
    unique_filename = image_url[len(prefix) :]
    if not unique_filename or unique_filename != Path(unique_filename).name:
        return

    (get_images_dir(settings) / unique_filename).unlink(missing_ok=True)
    logger.info("Image removed", filename=unique_filename)
