"""Screenshot storage on local disk: validate, save under a random name, delete by URL."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from bugtracker.core.errors import InvalidUpload
from bugtracker.schemas.upload import FileUpload

if TYPE_CHECKING:
    from bugtracker.core.config import Settings

logger = logging.getLogger(__name__)

# Allowed image types and the extension each is stored with.
ALLOWED_MIME_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
SCREENSHOT_FOLDER = "screenshots"


@dataclass(frozen=True)
class IncomingFile:
    """An uploaded file already read into memory."""

    filename: str
    mimetype: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


def validate_file(file: IncomingFile, settings: Settings) -> list[str]:
    """Return a list of problems with the file; empty when it is acceptable."""
    errors: list[str] = []
    if file.size == 0:
        errors.append(f"{file.filename or 'file'}: file is empty")
    if file.size > settings.MAX_UPLOAD_BYTES:
        limit_mb = settings.MAX_UPLOAD_BYTES / (1024 * 1024)
        errors.append(f"{file.filename or 'file'}: size exceeds limit of {limit_mb:g}MB")
    if file.mimetype not in ALLOWED_MIME_TYPES:
        errors.append(f"{file.filename or 'file'}: type {file.mimetype} not allowed")
    return errors


def _folder_path(settings: Settings, folder: str) -> Path:
    if not folder or "/" in folder or "\\" in folder or folder in (".", ".."):
        raise InvalidUpload(f"Invalid upload folder: {folder!r}")
    return Path(settings.UPLOAD_DIR) / folder


def store_files(
    files: list[IncomingFile],
    settings: Settings,
    folder: str = SCREENSHOT_FOLDER,
) -> list[FileUpload]:
    """
    Validate every file first, then write them all. Nothing is written if any
    file is rejected.
    """
    if not files:
        raise InvalidUpload("No files were uploaded.")
    if len(files) > settings.MAX_UPLOAD_FILES:
        raise InvalidUpload(f"Maximum {settings.MAX_UPLOAD_FILES} files allowed")
    problems = [p for f in files for p in validate_file(f, settings)]
    if problems:
        raise InvalidUpload("; ".join(problems))

    target_dir = _folder_path(settings, folder)
    target_dir.mkdir(parents=True, exist_ok=True)
    stored: list[FileUpload] = []
    for f in files:
        name = f"{uuid.uuid4().hex}{ALLOWED_MIME_TYPES[f.mimetype]}"
        (target_dir / name).write_bytes(f.content)
        stored.append(
            FileUpload(
                filename=name,
                mimetype=f.mimetype,
                size=f.size,
                url=f"{settings.UPLOAD_URL_PREFIX}/{folder}/{name}",
            )
        )
    logger.info("Stored uploads", extra={"count": len(stored), "folder": folder})
    return stored


def delete_file(url: str, settings: Settings) -> bool:
    """Remove a stored file by its URL. Returns False when it was already gone."""
    prefix = settings.UPLOAD_URL_PREFIX + "/"
    if not url.startswith(prefix):
        raise InvalidUpload("URL does not point into the upload area")
    relative = url[len(prefix):]
    root = Path(settings.UPLOAD_DIR).resolve()
    path = (root / relative).resolve()
    if root not in path.parents:
        raise InvalidUpload("URL does not point into the upload area")
    if not path.is_file():
        return False
    path.unlink()
    logger.info("Deleted upload", extra={"url": url})
    return True
