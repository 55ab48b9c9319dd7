import asyncio
import logging
from typing import IO, Any, Final

import boto3
from boto3.exceptions import S3UploadFailedError
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings

logger = logging.getLogger(__name__)

PUBLIC_READ: Final[str] = "public-read"


class StorageError(Exception):
    """Raised when a call to the object store fails."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @classmethod
    def from_exception(cls, exc: Exception) -> "StorageError":
        # the transfer manager may wrap the service error
        if isinstance(exc, S3UploadFailedError) and isinstance(exc.__context__, ClientError):
            exc = exc.__context__
        if isinstance(exc, ClientError):
            error = exc.response.get("Error", {})
            return cls(error.get("Message") or str(exc), code=error.get("Code"))
        return cls(str(exc), code=type(exc).__name__)

    def to_dict(self) -> dict[str, Any]:
        return {"name": "StorageError", "code": self.code, "message": self.message}


class StorageService:
    """S3 storage backend shared by all requests; holds configuration only."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        session = boto3.session.Session()
        self.client = session.client(
            "s3",
            endpoint_url=settings.aws_endpoint_url or None,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.aws_region,
            config=Config(signature_version="s3v4"),
        )
        self.bucket = settings.aws_bucket_name
        self.base_path = settings.aws_bucket_path

    def public_url(self, key: str) -> str:
        return f"{self.base_path}/{key}"

    async def put_object(
        self,
        key: str,
        fileobj: IO[bytes],
        content_type: str | None = None,
        acl: str = PUBLIC_READ,
    ) -> str:
        """Stream ``fileobj`` to ``key`` and return the object's public URL."""
        extra_args = {"ACL": acl}
        if content_type:
            extra_args["ContentType"] = content_type

        def _upload() -> None:
            self.client.upload_fileobj(fileobj, self.bucket, key, ExtraArgs=extra_args)

        try:
            await asyncio.to_thread(_upload)
        except (ClientError, BotoCoreError, S3UploadFailedError) as exc:
            logger.error("Upload of %s to bucket %s failed: %s", key, self.bucket, exc)
            raise StorageError.from_exception(exc) from exc

        logger.info("Stored %s in bucket %s", key, self.bucket)
        return self.public_url(key)

    async def delete_object(self, key: str | None) -> dict[str, Any]:
        # key is passed through unchecked; the SDK rejects a missing one
        def _delete() -> dict[str, Any]:
            return self.client.delete_object(Bucket=self.bucket, Key=key)

        try:
            response = await asyncio.to_thread(_delete)
        except (ClientError, BotoCoreError) as exc:
            raise StorageError.from_exception(exc) from exc

        logger.info("Deleted %s from bucket %s: %s", key, self.bucket, response)
        return response
