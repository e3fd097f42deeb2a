"""
Shared test fixtures and configuration.
"""

import os

import pytest

# Set test environment variables before importing app modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/supportbot_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from fastapi.testclient import TestClient  # noqa: E402

from app.api.deps import (  # noqa: E402
    get_chat_service,
    get_debug_service,
    get_upload_service,
    get_user_storage,
)
from app.core.errors import UpstreamError  # noqa: E402
from app.main import app  # noqa: E402
from app.services import ChatService, DebugService, UploadService  # noqa: E402
from app.storage import ChatStore, DebugSessionStore, LocalStorage, UserStorage  # noqa: E402
from app.utils.auth import create_access_token  # noqa: E402


class FakeMonitor:
    """Stands in for CloudWatchMonitor."""

    def __init__(self, logs=None, metrics=None, error=None):
        self.logs = logs if logs is not None else ["START RequestId: 1", "Task timed out after 3.00 seconds"]
        self.metrics = metrics if metrics is not None else {"id": "m1", "values": [4.0, 2.0]}
        self.error = error
        self.calls = []

    def fetch_logs(self, resource_id):
        self.calls.append(("logs", resource_id))
        if self.error:
            raise UpstreamError(self.error)
        return list(self.logs)

    def fetch_metrics(self, resource_id):
        self.calls.append(("metrics", resource_id))
        return dict(self.metrics)


class FakeGenerator:
    """Stands in for LambdaGenerator."""

    def __init__(self, reply="Increase the function timeout.", error=None):
        self.reply = reply
        self.error = error
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error:
            raise UpstreamError(self.error)
        return self.reply


class FakeUploader:
    bucket = "test-bucket"

    def __init__(self):
        self.objects = {}

    def put(self, key, body, content_type=None):
        self.objects[key] = (body, content_type)


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def generator():
    return FakeGenerator()


@pytest.fixture
def monitor():
    return FakeMonitor()


@pytest.fixture
def uploader():
    return FakeUploader()


@pytest.fixture
def chat_service(storage, generator):
    return ChatService(ChatStore(storage), generator=generator)


@pytest.fixture
def debug_service(storage, monitor, generator):
    return DebugService(DebugSessionStore(storage), monitor=monitor, generator=generator)


@pytest.fixture
def client(storage, chat_service, debug_service, uploader):
    users = UserStorage(storage)
    uploads = UploadService(uploader)
    app.dependency_overrides[get_user_storage] = lambda: users
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    app.dependency_overrides[get_debug_service] = lambda: debug_service
    app.dependency_overrides[get_upload_service] = lambda: uploads
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_auth_headers(user_id: str) -> dict:
    token = create_access_token(data={"sub": user_id, "username": user_id})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers():
    return make_auth_headers("alice")


@pytest.fixture
def other_auth_headers():
    return make_auth_headers("bob")
