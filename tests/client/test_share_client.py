"""
Test suite for ShareClient.

Runs the client against the real application through httpx.ASGITransport;
the application uses the in-memory database, the in-memory S3 client and
the fake auth service.

System role: End-to-end verification of the client runtime
"""

import asyncio
import io

import httpx
import pytest

from fileshare.api.main import create_app
from fileshare.client import ProgressReader, ShareClient
from fileshare.core.exceptions import AuthenticationRequiredError, FileRecordNotFoundError
from fileshare.core.progress import ProgressTracker
from fileshare.core.session_store import SessionChangeEvent, SessionEventType, SessionStatus


async def settle() -> None:
    """Let the session store process published events."""
    for _ in range(5):
        await asyncio.sleep(0)


@pytest.fixture
def app(backend, test_settings):
    return create_app(backend=backend, settings=test_settings)


@pytest.fixture
async def share_client(app):
    client = ShareClient("http://testserver", transport=httpx.ASGITransport(app=app))
    yield client
    await client.close()


@pytest.fixture
async def other_client(app):
    client = ShareClient("http://testserver", transport=httpx.ASGITransport(app=app))
    yield client
    await client.close()


@pytest.fixture
def alice_credentials(fake_auth_service) -> tuple[str, str]:
    fake_auth_service.add_user("alice@example.com", "secret")
    return "alice@example.com", "secret"


class TestProgressReader:
    """Test suite for ProgressReader."""

    def test_reads_report_progress(self) -> None:
        reported: list[int] = []
        reader = ProgressReader(io.BytesIO(b"x" * 100), ProgressTracker(100, reported.append))

        while reader.read(25):
            pass

        assert reported == [25, 50, 75, 100]

    def test_seek_and_tell_pass_through(self) -> None:
        reader = ProgressReader(io.BytesIO(b"abcdef"), ProgressTracker(6))

        assert reader.seek(0, io.SEEK_END) == 6
        assert reader.tell() == 6


class TestSessionOperations:
    """Test suite for sign-in, sign-out and session events."""

    @pytest.mark.asyncio
    async def test_signed_out_by_default(self, share_client: ShareClient) -> None:
        assert await share_client.get_session() is None

    @pytest.mark.asyncio
    async def test_sign_in_publishes_event_and_keeps_cookie(
        self, share_client: ShareClient, alice_credentials
    ) -> None:
        # Arrange
        events = share_client.session_events()

        # Act
        identity = await share_client.sign_in(*alice_credentials)

        # Assert
        assert identity.email == "alice@example.com"
        assert (await share_client.get_session()) == identity
        assert await events.__anext__() == SessionChangeEvent(SessionEventType.SIGNED_IN, identity)

    @pytest.mark.asyncio
    async def test_sign_out_publishes_event(self, share_client: ShareClient, alice_credentials) -> None:
        await share_client.sign_in(*alice_credentials)
        events = share_client.session_events()

        await share_client.sign_out()

        assert await share_client.get_session() is None
        assert (await events.__anext__()).type is SessionEventType.SIGNED_OUT

    @pytest.mark.asyncio
    async def test_session_store_follows_client(self, share_client: ShareClient, alice_credentials) -> None:
        async with share_client.session_store() as store:
            assert store.state.status is SessionStatus.ABSENT

            await share_client.sign_in(*alice_credentials)
            await settle()
            assert store.state.status is SessionStatus.PRESENT

            await share_client.sign_out()
            await settle()
            assert store.state.status is SessionStatus.ABSENT


class TestGatedOperations:
    """Test suite for operations that need a session."""

    @pytest.mark.asyncio
    async def test_list_without_session_requires_login(self, share_client: ShareClient) -> None:
        with pytest.raises(AuthenticationRequiredError):
            await share_client.list_files()

    @pytest.mark.asyncio
    async def test_upload_without_session_requires_login(self, share_client: ShareClient) -> None:
        with pytest.raises(AuthenticationRequiredError):
            await share_client.upload(io.BytesIO(b"data"), "a.txt")


class TestShareFlow:
    """End-to-end: upload, share, anonymous download, delete."""

    @pytest.mark.asyncio
    async def test_full_flow(
        self, share_client: ShareClient, other_client: ShareClient, alice_credentials, fake_s3
    ) -> None:
        # Sign in and upload with progress
        await share_client.sign_in(*alice_credentials)
        reported: list[int] = []
        uploaded = await share_client.upload(
            io.BytesIO(b"quarterly numbers"), "report.pdf", "application/pdf", on_progress=reported.append
        )
        key = uploaded.file.unique_key
        assert reported[-1] == 100
        assert uploaded.share_url == f"https://share.example/download/{key}"
        assert share_client.share_link(key) == f"http://testserver/download/{key}"

        # Anonymous recipient resolves and downloads twice
        shared = await other_client.resolve(key)
        assert shared.name == "report.pdf"
        for _ in range(2):
            destination = io.BytesIO()
            assert await other_client.download(key, destination) == len(b"quarterly numbers")
            assert destination.getvalue() == b"quarterly numbers"

        # Owner sees the count
        listing = await share_client.list_files()
        assert listing.total == 1
        assert listing.files[0].downloads == 2

        # Owner deletes; link is dead, blob is gone, repeat delete is fine
        await share_client.delete_file(uploaded.file.id)
        await share_client.delete_file(uploaded.file.id)
        with pytest.raises(FileRecordNotFoundError):
            await other_client.resolve(key)
        with pytest.raises(FileRecordNotFoundError):
            await other_client.download(key, io.BytesIO())
        assert fake_s3.objects == {}

    @pytest.mark.asyncio
    async def test_users_only_see_their_own_files(
        self, share_client: ShareClient, other_client: ShareClient, alice_credentials, fake_auth_service
    ) -> None:
        fake_auth_service.add_user("bob@example.com", "hunter2")
        await share_client.sign_in(*alice_credentials)
        await other_client.sign_in("bob@example.com", "hunter2")

        uploaded = await share_client.upload(io.BytesIO(b"alice's"), "a.txt", "text/plain")
        await other_client.delete_file(uploaded.file.id)

        assert (await other_client.list_files()).total == 0
        assert (await share_client.list_files()).total == 1
