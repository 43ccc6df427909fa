"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database, fake S3 client, fake auth service, settings,
backend handle and application fixtures
Dependencies: pytest, sqlalchemy, httpx, botocore
System role: Test infrastructure and fixture management
"""

import io
import json
import time
import uuid
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
from botocore.exceptions import ClientError
from botocore.response import StreamingBody

from fileshare.configs.backend import BackendSettings
from fileshare.configs.settings import Settings
from fileshare.configs.sharing import SharingSettings
from fileshare.configs.storage import StorageSettings

BACKEND_URL = "http://backend.test"


class FakeS3Client:
    """In-memory stand-in for a boto3 S3 client."""

    def __init__(self) -> None:
        self.objects: dict[str, bytes] = {}
        self.extra_args: dict[str, dict] = {}
        self.fail_uploads = False

    def upload_fileobj(self, fileobj, bucket, key, ExtraArgs=None, Callback=None):
        if self.fail_uploads:
            raise ClientError(
                {"Error": {"Code": "InternalError", "Message": "Storage unavailable"}},
                "PutObject",
            )
        data = b""
        while True:
            chunk = fileobj.read(1024)
            if not chunk:
                break
            data += chunk
            if Callback is not None:
                Callback(len(chunk))
        self.objects[key] = data
        self.extra_args[key] = ExtraArgs or {}

    def get_object(self, Bucket, Key):
        if Key not in self.objects:
            raise ClientError(
                {"Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist."}},
                "GetObject",
            )
        data = self.objects[Key]
        return {"Body": StreamingBody(io.BytesIO(data), len(data))}

    def delete_object(self, Bucket, Key):
        self.objects.pop(Key, None)
        return {}


class FakeAuthService:
    """
    Minimal auth REST API served through httpx.MockTransport.

    Tokens are opaque strings: "access-<user_id>" and "refresh-<user_id>".
    `overrides` maps a path to (status, httpx.Response kwargs) served instead.
    """

    def __init__(self) -> None:
        self.users: dict[str, dict] = {}
        self.revoked: set[str] = set()
        self.require_confirmation = False
        self.overrides: dict[str, tuple[int, dict]] = {}

    def add_user(self, email: str, password: str) -> str:
        user_id = str(uuid.uuid4())
        self.users[email] = {"id": user_id, "email": email, "password": password}
        return user_id

    def _session(self, user: dict) -> dict:
        return {
            "access_token": f"access-{user['id']}",
            "refresh_token": f"refresh-{user['id']}",
            "expires_at": int(time.time()) + 3600,
            "user": {"id": user["id"], "email": user["email"]},
        }

    def _user_for_token(self, token: str) -> dict | None:
        if token in self.revoked:
            return None
        for user in self.users.values():
            if token in (f"access-{user['id']}", f"refresh-{user['id']}"):
                return user
        return None

    def handler(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path.removeprefix("/auth/v1")
        token = request.headers.get("Authorization", "").removeprefix("Bearer ")

        if path in self.overrides:
            status_code, kwargs = self.overrides[path]
            return httpx.Response(status_code, **kwargs)

        if path == "/health":
            return httpx.Response(200, json={"name": "auth"})

        if path == "/token":
            body = json.loads(request.content)
            if request.url.params.get("grant_type") == "password":
                user = self.users.get(body["email"])
                if user is None or user["password"] != body["password"]:
                    return httpx.Response(
                        400,
                        json={"error": "invalid_grant", "error_description": "Invalid login credentials"},
                    )
                return httpx.Response(200, json=self._session(user))
            user = self._user_for_token(body.get("refresh_token", ""))
            if user is None:
                return httpx.Response(400, json={"error_description": "Invalid Refresh Token"})
            return httpx.Response(200, json=self._session(user))

        if path == "/signup":
            body = json.loads(request.content)
            if body["email"] in self.users:
                return httpx.Response(422, json={"msg": "User already registered"})
            self.add_user(body["email"], body["password"])
            user = self.users[body["email"]]
            if self.require_confirmation:
                return httpx.Response(200, json={"id": user["id"], "email": user["email"]})
            return httpx.Response(200, json=self._session(user))

        if path == "/user":
            user = self._user_for_token(token)
            if user is None:
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json={"id": user["id"], "email": user["email"]})

        if path == "/logout":
            self.revoked.add(token)
            return httpx.Response(204)

        return httpx.Response(404, json={"msg": "not found"})


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with the schema created.

    Yields:
        AsyncEngine: Engine disposed after the test (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from fileshare.boundary.db.base import Base

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Session factory bound to the test engine."""
    from fileshare.boundary.db.connection import get_async_session_factory

    return get_async_session_factory(test_engine)


@pytest.fixture
async def test_async_db(test_session_factory):
    """
    Create in-memory SQLite async database session for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    async with test_session_factory() as session:
        yield session
        await session.rollback()


@pytest.fixture
def fake_s3() -> FakeS3Client:
    """In-memory S3 client."""
    return FakeS3Client()


@pytest.fixture
def file_store(fake_s3):
    """S3FileStore backed by the in-memory S3 client."""
    from fileshare.boundary.aws.s3_client import S3FileStore

    return S3FileStore(bucket="files", client=fake_s3)


@pytest.fixture
def fake_auth_service() -> FakeAuthService:
    """Auth REST API fake with no users."""
    return FakeAuthService()


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at the fake backend."""
    return Settings(
        backend=BackendSettings(url=BACKEND_URL, anon_key="anon-key"),
        storage=StorageSettings(bucket="files"),
        sharing=SharingSettings(public_origin="https://share.example"),
    )


@pytest.fixture
async def auth_client(test_settings, fake_auth_service):
    """AuthClient talking to the fake auth service."""
    from fileshare.boundary.auth import AuthClient

    client = AuthClient(
        test_settings.backend,
        transport=httpx.MockTransport(fake_auth_service.handler),
    )
    yield client
    await client.close()


@pytest.fixture
def backend(auth_client, file_store, test_session_factory):
    """Backend handle over the fakes and the in-memory database."""
    from fileshare.boundary.backend import Backend

    return Backend(auth=auth_client, storage=file_store, session_factory=test_session_factory)


@pytest.fixture
def mock_auth_client():
    """
    Create mock AuthClient for testing.

    Returns:
        AsyncMock: get_user resolves to no identity by default
    """
    from fileshare.boundary.auth import AuthClient

    client = AsyncMock(spec=AuthClient)
    client.get_user = AsyncMock(return_value=None)
    return client


@pytest.fixture
def mock_file_service():
    """
    Create mock FileService for testing.

    Returns:
        AsyncMock: Mocked FileService with async methods
    """
    return AsyncMock()


@pytest.fixture
def mock_backend(mock_auth_client):
    """Backend handle whose collaborators are all mocks."""
    from fileshare.boundary.backend import Backend

    return Backend(
        auth=mock_auth_client,
        storage=MagicMock(),
        session_factory=MagicMock(),
    )


@pytest.fixture
def user_id() -> str:
    """Generate a test user ID."""
    return str(uuid.uuid4())
