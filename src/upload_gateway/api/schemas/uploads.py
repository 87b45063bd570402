"""Upload response schemas."""

from pydantic import BaseModel


class UploadResponse(BaseModel):
    id: str
    filelink: str
    filename: str | None = None  # only for generic (non-image) endpoints


class UploadErrorResponse(BaseModel):
    error: str
