from app.schemas.storage import (
    DeleteErrorResponse,
    DeleteRequest,
    DeleteResponse,
    UploadErrorResponse,
    UploadResponse,
)

__all__ = [
    "UploadResponse",
    "UploadErrorResponse",
    "DeleteRequest",
    "DeleteResponse",
    "DeleteErrorResponse",
]
