from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str = "Image Uploaded Successfully!"
    file_url: str = Field(..., alias="fileUrl")


class UploadErrorResponse(BaseModel):
    error: str | dict[str, Any]


class DeleteRequest(BaseModel):
    key: str | None = None


class DeleteResponse(BaseModel):
    message: str = "File deleted successfully"


class DeleteErrorResponse(BaseModel):
    error: str = "Failed to delete file from S3"
