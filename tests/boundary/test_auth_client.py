"""
Test suite for AuthClient.

Drives the client against an httpx.MockTransport auth service and verifies
local token verification with pyjwt.

System role: Verification of the auth service boundary
"""

import time

import httpx
import jwt
import pytest

from fileshare.boundary.auth import AuthClient
from fileshare.configs.backend import BackendSettings
from fileshare.core.exceptions import AuthServiceError
from fileshare.core.session_store import Identity

JWT_SECRET = "test-secret-with-enough-bytes-for-hs256"


class TestPasswordSignIn:
    """Test suite for sign-in and sign-up."""

    @pytest.mark.asyncio
    async def test_sign_in_returns_active_session(self, auth_client: AuthClient, fake_auth_service) -> None:
        user_id = fake_auth_service.add_user("alice@example.com", "secret")

        session = await auth_client.sign_in_with_password("alice@example.com", "secret")

        assert session.is_active
        assert session.identity == Identity(user_id=user_id, email="alice@example.com")
        assert session.access_token == f"access-{user_id}"

    @pytest.mark.asyncio
    async def test_bad_credentials_carry_service_message(
        self, auth_client: AuthClient, fake_auth_service
    ) -> None:
        fake_auth_service.add_user("alice@example.com", "secret")

        with pytest.raises(AuthServiceError) as exc_info:
            await auth_client.sign_in_with_password("alice@example.com", "wrong")

        assert exc_info.value.message == "Invalid login credentials"
        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_sign_up_pending_confirmation_is_inactive(
        self, auth_client: AuthClient, fake_auth_service
    ) -> None:
        fake_auth_service.require_confirmation = True

        session = await auth_client.sign_up("new@example.com", "secret")

        assert not session.is_active
        assert session.identity.email == "new@example.com"

    @pytest.mark.asyncio
    async def test_refresh_issues_new_session(self, auth_client: AuthClient, fake_auth_service) -> None:
        user_id = fake_auth_service.add_user("alice@example.com", "secret")

        session = await auth_client.refresh_session(f"refresh-{user_id}")

        assert session.identity.user_id == user_id


class TestGetUser:
    """Test suite for AuthClient.get_user() through the user endpoint."""

    @pytest.mark.asyncio
    async def test_no_token_means_no_identity(self, auth_client: AuthClient) -> None:
        assert await auth_client.get_user(None) is None

    @pytest.mark.asyncio
    async def test_valid_token_resolves_identity(self, auth_client: AuthClient, fake_auth_service) -> None:
        user_id = fake_auth_service.add_user("alice@example.com", "secret")

        identity = await auth_client.get_user(f"access-{user_id}")

        assert identity == Identity(user_id=user_id, email="alice@example.com")

    @pytest.mark.asyncio
    async def test_rejected_token_means_no_identity(self, auth_client: AuthClient) -> None:
        assert await auth_client.get_user("access-unknown") is None

    @pytest.mark.asyncio
    async def test_sign_out_revokes_token(self, auth_client: AuthClient, fake_auth_service) -> None:
        user_id = fake_auth_service.add_user("alice@example.com", "secret")
        token = f"access-{user_id}"

        await auth_client.sign_out(token)
        await auth_client.sign_out(token)

        assert await auth_client.get_user(token) is None

    @pytest.mark.asyncio
    async def test_unreachable_service_raises(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = AuthClient(
            BackendSettings(url="http://backend.test", anon_key="anon"),
            transport=httpx.MockTransport(handler),
        )

        with pytest.raises(AuthServiceError):
            await client.get_user("any-token")
        await client.close()

    @pytest.mark.asyncio
    async def test_requests_carry_public_key(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={})

        client = AuthClient(
            BackendSettings(url="http://backend.test", anon_key="anon"),
            transport=httpx.MockTransport(handler),
        )
        await client.check_health()
        await client.close()

        assert seen[0].headers["apikey"] == "anon"
        assert str(seen[0].url) == "http://backend.test/auth/v1/health"



class TestUnexpectedPayloads:
    """Test suite for successful responses whose body cannot be used."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "response_kwargs",
        [
            {"text": "<html>gateway</html>"},
            {"json": {"email": "alice@example.com"}},
            {"json": ["not", "an", "object"]},
        ],
    )
    async def test_user_lookup_raises_auth_service_error(
        self, auth_client: AuthClient, fake_auth_service, response_kwargs: dict
    ) -> None:
        fake_auth_service.overrides["/user"] = (200, response_kwargs)

        with pytest.raises(AuthServiceError) as exc_info:
            await auth_client.get_user("access-anything")

        assert exc_info.value.operation == "get_user"
        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_sign_in_with_unreadable_body_raises(self, auth_client: AuthClient, fake_auth_service) -> None:
        fake_auth_service.overrides["/token"] = (200, {"text": "upstream timeout"})

        with pytest.raises(AuthServiceError) as exc_info:
            await auth_client.sign_in_with_password("alice@example.com", "secret")

        assert exc_info.value.message == "Auth service returned an unexpected response"


class TestLocalVerification:
    """Test suite for get_user() with a configured JWT secret."""

    @pytest.fixture
    async def local_client(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise AssertionError("remote lookup must not happen")

        client = AuthClient(
            BackendSettings(url="http://backend.test", anon_key="anon", jwt_secret=JWT_SECRET),
            transport=httpx.MockTransport(handler),
        )
        yield client
        await client.close()

    @staticmethod
    def token(**claims) -> str:
        payload = {"sub": "user-1", "email": "a@example.com", "aud": "authenticated", "exp": int(time.time()) + 60}
        payload.update(claims)
        return jwt.encode(payload, JWT_SECRET, algorithm="HS256")

    @pytest.mark.asyncio
    async def test_valid_token(self, local_client: AuthClient) -> None:
        assert await local_client.get_user(self.token()) == Identity(user_id="user-1", email="a@example.com")

    @pytest.mark.asyncio
    async def test_expired_token(self, local_client: AuthClient) -> None:
        assert await local_client.get_user(self.token(exp=int(time.time()) - 60)) is None

    @pytest.mark.asyncio
    async def test_wrong_audience(self, local_client: AuthClient) -> None:
        assert await local_client.get_user(self.token(aud="anon")) is None

    @pytest.mark.asyncio
    async def test_forged_signature(self, local_client: AuthClient) -> None:
        forged = jwt.encode({"sub": "user-1", "aud": "authenticated"}, "another-secret-of-enough-length!", algorithm="HS256")

        assert await local_client.get_user(forged) is None
