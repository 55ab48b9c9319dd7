import sys
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

# Ensure project root is on sys.path
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from app.core.config import Settings
from app.main import create_app
from app.services.storage import PUBLIC_READ, StorageError, StorageService

BUCKET_PATH = "https://test-bucket.s3.us-east-1.amazonaws.com"


class InMemoryStorage(StorageService):
    def __init__(self, settings: Settings) -> None:  # type: ignore[super-init-not-called]
        self.settings = settings
        self.bucket = settings.aws_bucket_name
        self.base_path = settings.aws_bucket_path
        self.objects: dict[str, dict] = {}
        self.deleted: list[str | None] = []
        self.fail_with: StorageError | None = None

    async def put_object(self, key, fileobj, content_type=None, acl=PUBLIC_READ):  # type: ignore[override]
        if self.fail_with:
            raise self.fail_with
        self.objects[key] = {"body": fileobj.read(), "content_type": content_type, "acl": acl}
        return self.public_url(key)

    async def delete_object(self, key):  # type: ignore[override]
        if self.fail_with:
            raise self.fail_with
        self.deleted.append(key)
        self.objects.pop(key, None)
        return {"ResponseMetadata": {"HTTPStatusCode": 204}}


@pytest.fixture
def settings() -> Settings:
    return Settings(
        _env_file=None,
        AWS_BUCKET_NAME="test-bucket",
        AWS_ACCESS_KEY_ID="test",
        AWS_SECRET_ACCESS_KEY="test",
        AWS_REGION="us-east-1",
        AWS_BUCKET_PATH=BUCKET_PATH,
    )


@pytest.fixture
def storage(settings) -> InMemoryStorage:
    return InMemoryStorage(settings)


@pytest.fixture
def app_instance(settings, storage):
    return create_app(settings, storage)


@pytest_asyncio.fixture
async def client(app_instance):
    transport = ASGITransport(app=app_instance)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
