"""
Fixtures for HTTP API tests.

Builds the application around a mock backend; file service calls are
replaced through dependency overrides.
"""

import uuid
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from fileshare.api.deps.dependencies import get_file_service
from fileshare.api.main import create_app
from fileshare.core.session_store import Identity

ALICE = Identity(user_id="user-alice", email="alice@example.com")
AUTH_HEADERS = {"Authorization": "Bearer access-alice"}


def _make_record(user_id: str = ALICE.user_id, **overrides) -> SimpleNamespace:
    values = dict(
        id=uuid.uuid4(),
        name="report.pdf",
        size=2048,
        content_type="application/pdf",
        created_at=datetime(2024, 5, 1, tzinfo=timezone.utc),
        unique_key="AbCdEfGhIj",
        downloads=0,
        path=f"{user_id}/AbCdEfGhIj-report.pdf",
        user_id=user_id,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


@pytest.fixture
def alice() -> Identity:
    return ALICE


@pytest.fixture
def make_record():
    """Factory of file record stand-ins with the attributes the views read."""
    return _make_record


@pytest.fixture
def app(mock_backend, test_settings, mock_file_service):
    app = create_app(backend=mock_backend, settings=test_settings)
    app.dependency_overrides[get_file_service] = lambda: mock_file_service
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


@pytest.fixture
def signed_in(mock_auth_client) -> dict[str, str]:
    """Make the auth client accept the test bearer token; returns the headers to send."""

    async def get_user(token):
        return ALICE if token == "access-alice" else None

    mock_auth_client.get_user.side_effect = get_user
    return AUTH_HEADERS
