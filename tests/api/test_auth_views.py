"""
Test suite for sign-in, sign-up, sign-out and session views.
"""

import time

from fileshare.boundary.auth import AuthSession
from fileshare.core.exceptions import AuthServiceError
from fileshare.core.session_store import Identity


def active_session(identity: Identity) -> AuthSession:
    return AuthSession(
        identity=identity,
        access_token="access-alice",
        refresh_token="refresh-alice",
        expires_at=int(time.time()) + 3600,
    )


def test_login_sets_session_cookies(client, mock_auth_client, alice):
    mock_auth_client.sign_in_with_password.return_value = active_session(alice)

    response = client.post("/login", json={"email": alice.email, "password": "secret"})

    assert response.status_code == 200
    assert response.json()["session"]["authenticated"] is True
    assert response.json()["session"]["user_id"] == alice.user_id
    assert response.cookies["fileshare-access-token"] == "access-alice"
    assert response.cookies["fileshare-refresh-token"] == "refresh-alice"
    mock_auth_client.sign_in_with_password.assert_awaited_once_with(alice.email, "secret")


def test_login_with_bad_credentials(client, mock_auth_client, alice):
    mock_auth_client.sign_in_with_password.side_effect = AuthServiceError(
        "Invalid login credentials", status_code=400, operation="sign_in"
    )

    response = client.post("/login", json={"email": alice.email, "password": "wrong"})

    assert response.status_code == 400
    assert response.json()["detail"]["title"] == "Login failed"
    assert response.json()["detail"]["description"] == "Invalid login credentials"
    assert "fileshare-access-token" not in response.cookies


def test_login_when_auth_service_down(client, mock_auth_client, alice):
    mock_auth_client.sign_in_with_password.side_effect = AuthServiceError(
        "Auth service unreachable", operation="sign_in"
    )

    response = client.post("/login", json={"email": alice.email, "password": "secret"})

    assert response.status_code == 502


def test_signup_pending_confirmation(client, mock_auth_client):
    mock_auth_client.sign_up.return_value = AuthSession(identity=Identity(user_id="new-user", email="n@example.com"))

    response = client.post("/signup", json={"email": "n@example.com", "password": "secret"})

    assert response.status_code == 201
    assert response.json()["session"]["authenticated"] is False
    assert response.json()["notification"]["title"] == "Check your email"
    assert "fileshare-access-token" not in response.cookies


def test_signup_with_immediate_session(client, mock_auth_client, alice):
    mock_auth_client.sign_up.return_value = active_session(alice)

    response = client.post("/signup", json={"email": alice.email, "password": "secret"})

    assert response.status_code == 201
    assert response.json()["session"]["authenticated"] is True
    assert response.cookies["fileshare-access-token"] == "access-alice"


def test_logout_revokes_and_clears(client, signed_in, mock_auth_client):
    response = client.post("/logout", headers=signed_in)

    assert response.status_code == 200
    assert response.json()["session"]["authenticated"] is False
    mock_auth_client.sign_out.assert_awaited_once_with("access-alice")
    assert "fileshare-access-token" in response.headers.get("set-cookie", "")


def test_logout_without_session_is_noop(client, mock_auth_client):
    response = client.post("/logout")

    assert response.status_code == 200
    mock_auth_client.sign_out.assert_not_awaited()


def test_session_when_signed_out(client):
    assert client.get("/session").json() == {
        "authenticated": False,
        "user_id": None,
        "email": None,
        "expires_at": None,
    }


def test_refresh_without_cookie_is_unauthorized(client):
    response = client.post("/session/refresh")

    assert response.status_code == 401
    assert response.json()["detail"]["title"] == "Session expired"


def test_refresh_sets_new_cookies(client, mock_auth_client, alice):
    mock_auth_client.refresh_session.return_value = active_session(alice)
    client.cookies.set("fileshare-refresh-token", "refresh-alice")

    response = client.post("/session/refresh")

    assert response.status_code == 200
    assert response.json()["session"]["user_id"] == alice.user_id
    mock_auth_client.refresh_session.assert_awaited_once_with("refresh-alice")


def test_home_navigation_depends_on_session(client, signed_in):
    signed_out_links = [link["href"] for link in client.get("/").json()["navigation"]]
    signed_in_links = [link["href"] for link in client.get("/", headers=signed_in).json()["navigation"]]

    assert "/login" in signed_out_links
    assert "/dashboard" not in signed_out_links
    assert "/dashboard" in signed_in_links
    assert "/test-connection" in signed_in_links


def test_navigation_methods_match_routes(client, signed_in):
    links = {link["href"]: link["method"] for link in client.get("/", headers=signed_in).json()["navigation"]}

    assert links["/logout"] == "POST"
    assert links["/upload"] == "POST"
    assert links["/dashboard"] == "GET"
    assert client.request(links["/logout"], "/logout").status_code == 200


def test_rejected_refresh_token_is_unauthorized(client, mock_auth_client):
    mock_auth_client.refresh_session.side_effect = AuthServiceError(
        "Invalid Refresh Token", status_code=400, operation="refresh"
    )
    client.cookies.set("fileshare-refresh-token", "refresh-revoked")

    response = client.post("/session/refresh")

    assert response.status_code == 401
    assert response.json()["detail"]["title"] == "Session expired"
    assert response.json()["detail"]["description"] == "Invalid Refresh Token"


def test_refresh_when_auth_service_down(client, mock_auth_client):
    mock_auth_client.refresh_session.side_effect = AuthServiceError(
        "Auth service unreachable", operation="refresh"
    )
    client.cookies.set("fileshare-refresh-token", "refresh-alice")

    assert client.post("/session/refresh").status_code == 502
