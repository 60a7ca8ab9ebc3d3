"""Screenshot upload endpoint: multipart images in, stored URLs out."""

from typing import Annotated

from fastapi import APIRouter, Depends, File, Query, UploadFile

from bugtracker.api.v1.auth import get_current_user, require_admin
from bugtracker.core.config import Settings, get_settings
from bugtracker.schemas.common import SuccessResponse
from bugtracker.schemas.upload import UploadResponse
from bugtracker.schemas.user import UserPublic
from bugtracker.services.uploads import IncomingFile, delete_file, store_files

router = APIRouter()


async def _read_upload(upload: UploadFile, limit: int) -> IncomingFile:
    # Read one byte past the limit so oversize files are detected without buffering them whole.
    content = await upload.read(limit + 1)
    return IncomingFile(
        filename=upload.filename or "",
        mimetype=(upload.content_type or "").lower(),
        content=content,
    )


@router.post("/screenshots", response_model=UploadResponse)
async def upload_screenshots(
    files: Annotated[list[UploadFile], File(description="Up to five images (jpeg, png, gif, webp)")],
    _user: Annotated[UserPublic, Depends(get_current_user)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UploadResponse:
    """
    Store screenshots and return their URLs for use in a report's screenshots list.
    Rejects the whole batch if any file is too large, empty or not an image.
    """
    incoming = [await _read_upload(f, settings.MAX_UPLOAD_BYTES) for f in files]
    return UploadResponse(files=store_files(incoming, settings))


@router.delete("/screenshots", response_model=SuccessResponse)
def delete_screenshot(
    url: Annotated[str, Query(min_length=1)],
    _admin: Annotated[UserPublic, Depends(require_admin)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> SuccessResponse:
    """Remove a stored screenshot by URL. success is false when the file was already gone."""
    return SuccessResponse(success=delete_file(url, settings))
