from fastapi import Depends, Request

from app.core.config import Settings
from app.services.storage import StorageService
from app.services.uploads import ImageUploadService, UploadPolicy


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage(request: Request) -> StorageService:
    return request.app.state.storage


def get_upload_policy(settings: Settings = Depends(get_app_settings)) -> UploadPolicy:
    return UploadPolicy.from_settings(settings)


def get_upload_service(
    storage: StorageService = Depends(get_storage),
    policy: UploadPolicy = Depends(get_upload_policy),
) -> ImageUploadService:
    return ImageUploadService(storage, policy)
