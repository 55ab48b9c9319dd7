"""Image upload policy: field selection, file type filter, size limit and key naming."""

import logging
import os
import random
import string
from dataclasses import dataclass
from typing import Any

from starlette.datastructures import FormData, UploadFile

from app.core.config import Settings
from app.services.storage import StorageService

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"jpg", "jpeg", "png", "gif"})
IMAGES_ONLY = "Error: Images Only!"

_BASE36 = string.digits + string.ascii_lowercase
_FRAGMENT_LENGTH = 13


class UploadError(Exception):
    """Upload rejected by the multipart layer before anything reached storage."""

    def __init__(self, code: str, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.field = field

    @classmethod
    def file_too_large(cls, field: str) -> "UploadError":
        return cls("LIMIT_FILE_SIZE", "File too large", field)

    @classmethod
    def unexpected_field(cls, field: str) -> "UploadError":
        return cls("LIMIT_UNEXPECTED_FILE", "Unexpected field", field)

    @classmethod
    def malformed(cls, message: str) -> "UploadError":
        return cls("MALFORMED_MULTIPART", message)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": "UploadError", "code": self.code, "message": self.message}
        if self.field is not None:
            data["field"] = self.field
        return data


@dataclass(frozen=True)
class FileTypeCheck:
    accepted: bool
    reason: str | None = None

    @classmethod
    def accept(cls) -> "FileTypeCheck":
        return cls(accepted=True)

    @classmethod
    def reject(cls, reason: str = IMAGES_ONLY) -> "FileTypeCheck":
        return cls(accepted=False, reason=reason)


@dataclass(frozen=True)
class UploadPolicy:
    field_name: str = "image"
    max_file_size: int = 11_000_000
    key_prefix: str = "saskengallery"
    # room for multipart framing and small text fields around the file
    request_allowance: int = 1024 * 1024

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadPolicy":
        return cls(
            field_name=settings.upload_field_name,
            max_file_size=settings.upload_max_file_size,
            key_prefix=settings.upload_key_prefix,
        )


def check_file_type(filename: str | None, content_type: str | None) -> FileTypeCheck:
    """Both the extension and the declared MIME type must name an allowed image type."""
    extension = os.path.splitext(filename or "")[1].lower().lstrip(".")
    mime_type, _, subtype = (content_type or "").lower().partition("/")
    subtype = subtype.split(";", 1)[0].strip()

    if extension in ALLOWED_IMAGE_TYPES and mime_type == "image" and subtype in ALLOWED_IMAGE_TYPES:
        return FileTypeCheck.accept()
    return FileTypeCheck.reject()


def _random_fragment() -> str:
    return "".join(random.choices(_BASE36, k=_FRAGMENT_LENGTH))


def random_file_name(filename: str) -> str:
    # extension keeps the client's casing
    return _random_fragment() + _random_fragment() + os.path.splitext(filename)[1]


def build_object_key(prefix: str, filename: str) -> str:
    return f"{prefix}/{random_file_name(filename)}"


def select_upload(form: FormData, policy: UploadPolicy) -> UploadFile | None:
    """Return the single file sent under the upload field, if any.

    Files under any other field, or a second file under the upload field,
    are rejected the same way the multipart layer rejects them.
    """
    selected: UploadFile | None = None
    for field, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if field != policy.field_name or selected is not None:
            raise UploadError.unexpected_field(field)
        selected = value
    return selected


def check_request_size(content_length: str | None, policy: UploadPolicy) -> None:
    """Reject a request whose declared body cannot hold a file within the limit.

    Runs before the body is read, so oversized uploads are not spooled to disk.
    Requests without a usable ``Content-Length`` fall through to the per-file check.
    """
    if content_length is None:
        return
    try:
        length = int(content_length)
    except ValueError:
        return
    if length > policy.max_file_size + policy.request_allowance:
        logger.warning(
            "Rejected request of %d bytes; file limit is %d", length, policy.max_file_size
        )
        raise UploadError.file_too_large(policy.field_name)


def _file_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


class ImageUploadService:
    def __init__(self, storage: StorageService, policy: UploadPolicy) -> None:
        self.storage = storage
        self.policy = policy

    async def store(self, upload: UploadFile) -> str:
        """Enforce the size limit, then stream ``upload`` to storage and return its key.

        Raises ``UploadError`` for an oversized file and ``StorageError`` when
        the transfer fails.
        """
        size = _file_size(upload)
        if size > self.policy.max_file_size:
            logger.warning(
                "Rejected %s: %d bytes exceeds limit of %d",
                upload.filename,
                size,
                self.policy.max_file_size,
            )
            raise UploadError.file_too_large(self.policy.field_name)

        key = build_object_key(self.policy.key_prefix, upload.filename or "")
        await upload.seek(0)
        await self.storage.put_object(key, upload.file, content_type=upload.content_type)
        return key
