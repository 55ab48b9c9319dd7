import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException
from starlette.formparsers import MultiPartException

from app.api.deps import get_storage, get_upload_service
from app.schemas import (
    DeleteErrorResponse,
    DeleteRequest,
    DeleteResponse,
    UploadErrorResponse,
    UploadResponse,
)
from app.services.storage import StorageError, StorageService
from app.services.uploads import (
    ImageUploadService,
    UploadError,
    check_file_type,
    check_request_size,
    select_upload,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["files"])

NO_FILE_SELECTED = "No File Selected"


@router.post("/upload", response_model=UploadResponse | UploadErrorResponse)
async def upload_image(
    request: Request,
    uploader: ImageUploadService = Depends(get_upload_service),
) -> UploadResponse | UploadErrorResponse:
    # Failures are reported with HTTP 200 and an ``error`` body.
    try:
        check_request_size(request.headers.get("content-length"), uploader.policy)
        form = await request.form()
    except UploadError as exc:
        return UploadErrorResponse(error=exc.to_dict())
    except MultiPartException as exc:
        logger.warning("Malformed multipart body: %s", exc.message)
        return UploadErrorResponse(error=UploadError.malformed(exc.message).to_dict())
    except HTTPException as exc:
        logger.warning("Malformed multipart body: %s", exc.detail)
        return UploadErrorResponse(error=UploadError.malformed(exc.detail).to_dict())

    try:
        try:
            upload = select_upload(form, uploader.policy)
        except UploadError as exc:
            logger.warning("Rejected upload: %s", exc.message)
            return UploadErrorResponse(error=exc.to_dict())

        if upload is None:
            return UploadErrorResponse(error=NO_FILE_SELECTED)

        check = check_file_type(upload.filename, upload.content_type)
        if not check.accepted:
            logger.warning(
                "Rejected %s with content type %s", upload.filename, upload.content_type
            )
            return UploadErrorResponse(error=check.reason)

        try:
            key = await uploader.store(upload)
        except (UploadError, StorageError) as exc:
            return UploadErrorResponse(error=exc.to_dict())
    finally:
        await form.close()

    return UploadResponse(file_url=uploader.storage.public_url(key))


async def _read_delete_request(request: Request) -> DeleteRequest:
    # anything that is not a JSON object with a string key leaves the key unset
    try:
        return DeleteRequest.model_validate_json(await request.body())
    except ValidationError:
        return DeleteRequest()


@router.delete(
    "/delete",
    response_model=DeleteResponse,
    responses={status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": DeleteErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": DeleteRequest.model_json_schema()}},
        }
    },
)
async def delete_image(
    request: Request,
    storage: StorageService = Depends(get_storage),
):
    payload = await _read_delete_request(request)
    try:
        await storage.delete_object(payload.key)
    except StorageError:
        logger.exception("Error deleting file %s", payload.key)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=DeleteErrorResponse().model_dump(),
        )
    return DeleteResponse()
