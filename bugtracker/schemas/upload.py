"""Request/response schemas for screenshot uploads."""

from pydantic import BaseModel, Field


class FileUpload(BaseModel):
    """A stored file and the URL reports should reference it by."""

    filename: str
    mimetype: str
    size: int = Field(..., ge=0, description="Size in bytes.")
    url: str


class UploadResponse(BaseModel):
    """Response after successfully storing screenshots."""

    files: list[FileUpload] = Field(default_factory=list)
