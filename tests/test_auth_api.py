"""API tests for sign-in, session state, password change and staff accounts."""

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from surveydesk.core.config import settings
from surveydesk.domains.auth.state import AuthEventType
from surveydesk.domains.staff.models import StaffRole
from surveydesk.domains.staff.service import infer_role_and_store


MANAGER = "gerencia@barbour.co"
ANDINO = "andino@barbour.co"
STAFF_PASSWORD = "clave123"


def decode(token: str) -> dict:
    return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])


async def login(client, email: str, password: str = STAFF_PASSWORD, remember: bool = True):
    return await client.post(
        "/v1/auth/login",
        json={"email": email, "password": password, "remember": remember},
    )


@pytest.fixture
def events(app):
    """Auth events published while the test runs."""
    received = []

    async def listener(event):
        received.append(event)

    unsubscribe = app.state.auth_notifier.subscribe(listener)
    yield received
    unsubscribe()


# ============================================================
# Login / refresh / logout
# ============================================================


async def test_login_returns_tokens_with_identity_claims(client, events):
    response = await login(client, ANDINO)

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["persistence"] == "local"

    claims = decode(data["access_token"])
    assert claims["email"] == ANDINO
    assert claims["role"] == "store"
    assert claims["store"] == "andino"

    assert [e.type for e in events] == [AuthEventType.SIGNED_IN]
    assert events[0].persistence == "local"


async def test_login_without_remember_uses_session_persistence(client):
    response = await login(client, ANDINO, remember=False)

    data = response.json()
    assert data["persistence"] == "session"
    refresh = decode(data["refresh_token"])
    assert refresh["persistence"] == "session"
    assert refresh["exp"] - refresh["iat"] == settings.jwt_session_refresh_expire_hours * 3600


async def test_login_records_last_login(client, staff_repo):
    await login(client, MANAGER)

    account = await staff_repo.get_by_email(MANAGER)
    assert account.last_login_at is not None


async def test_login_with_wrong_password(client, events):
    response = await login(client, ANDINO, password="incorrecta")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
    assert events == []


async def test_login_with_unknown_email(client):
    response = await login(client, "nadie@barbour.co")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


async def test_refresh_keeps_original_sign_in_time(client):
    tokens = (await login(client, ANDINO)).json()

    response = await client.post(
        "/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )

    assert response.status_code == 200
    refreshed = decode(response.json()["access_token"])
    assert refreshed["auth_time"] == decode(tokens["access_token"])["auth_time"]
    assert refreshed["store"] == "andino"


async def test_refresh_rejects_access_token(client):
    tokens = (await login(client, ANDINO)).json()

    response = await client.post(
        "/v1/auth/refresh", json={"refresh_token": tokens["access_token"]}
    )

    assert response.status_code == 401


async def test_logout_revokes_both_tokens(client, blacklist, events):
    tokens = (await login(client, ANDINO)).json()
    headers = {"Authorization": f"Bearer {tokens['access_token']}"}

    response = await client.post(
        "/v1/auth/logout",
        json={"refresh_token": tokens["refresh_token"]},
        headers=headers,
    )

    assert response.status_code == 200
    assert len(blacklist.keys) == 2
    assert events[-1].type == AuthEventType.SIGNED_OUT

    response = await client.get("/v1/surveys/dashboard", headers=headers)
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_TOKEN"

    response = await client.post(
        "/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]}
    )
    assert response.status_code == 401


async def test_logout_requires_authentication(client):
    response = await client.post("/v1/auth/logout")

    assert response.status_code == 401


# ============================================================
# Session state
# ============================================================


async def test_session_signed_out(client):
    response = await client.get("/v1/auth/session")

    assert response.status_code == 200
    assert response.json()["signed_in"] is False


async def test_session_with_invalid_token_is_signed_out(client):
    response = await client.get(
        "/v1/auth/session", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.json()["signed_in"] is False


async def test_session_signed_in_manager(client, auth_headers):
    response = await client.get("/v1/auth/session", headers=auth_headers(MANAGER))

    data = response.json()
    assert data["signed_in"] is True
    assert data["email"] == MANAGER
    assert data["is_manager"] is True
    assert data["store"] is None


async def test_session_signed_in_store(client, auth_headers):
    response = await client.get("/v1/auth/session", headers=auth_headers(ANDINO))

    data = response.json()
    assert data["is_manager"] is False
    assert data["role"] == "store"
    assert data["store"] == "andino"


# ============================================================
# Password change
# ============================================================


async def test_change_password_after_recent_sign_in(client, auth_headers, events):
    response = await client.put(
        "/v1/staff/me/password",
        json={"new_password": "nuevaclave"},
        headers=auth_headers(ANDINO),
    )

    assert response.status_code == 200
    assert events[-1].type == AuthEventType.PASSWORD_CHANGED
    assert (await login(client, ANDINO, password="nuevaclave")).status_code == 200
    assert (await login(client, ANDINO)).status_code == 401


async def test_change_password_requires_recent_sign_in(client, auth_headers, events):
    stale = datetime.now(timezone.utc) - timedelta(
        minutes=settings.recent_login_max_age_minutes + 10
    )

    response = await client.put(
        "/v1/staff/me/password",
        json={"new_password": "nuevaclave"},
        headers=auth_headers(ANDINO, auth_time=stale),
    )

    assert response.status_code == 401
    error = response.json()["error"]
    assert error["code"] == "REAUTHENTICATION_REQUIRED"
    assert "sign back in" in error["message"]
    assert events == []
    assert (await login(client, ANDINO)).status_code == 200


async def test_change_password_rejects_short_password(client, auth_headers):
    response = await client.put(
        "/v1/staff/me/password",
        json={"new_password": "abc"},
        headers=auth_headers(ANDINO),
    )

    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"


# ============================================================
# Staff accounts
# ============================================================


async def test_get_me(client, auth_headers):
    response = await client.get("/v1/staff/me", headers=auth_headers(ANDINO))

    assert response.status_code == 200
    data = response.json()
    assert data["email"] == ANDINO
    assert data["store"] == "andino"
    assert "password_hash" not in data


async def test_manager_creates_store_account(client, auth_headers):
    response = await client.post(
        "/v1/staff",
        json={"email": "unicentro@barbour.co", "password": "secreto1"},
        headers=auth_headers(MANAGER),
    )

    assert response.status_code == 201
    data = response.json()
    assert data["role"] == "store"
    assert data["store"] == "unicentro"
    assert (await login(client, "unicentro@barbour.co", password="secreto1")).status_code == 200


async def test_store_staff_cannot_create_accounts(client, auth_headers):
    response = await client.post(
        "/v1/staff",
        json={"email": "unicentro@barbour.co", "password": "secreto1"},
        headers=auth_headers(ANDINO),
    )

    assert response.status_code == 403


async def test_create_account_for_unknown_store(client, auth_headers):
    response = await client.post(
        "/v1/staff",
        json={"email": "narnia@barbour.co", "password": "secreto1"},
        headers=auth_headers(MANAGER),
    )

    assert response.status_code == 422


async def test_create_duplicate_account(client, auth_headers):
    response = await client.post(
        "/v1/staff",
        json={"email": ANDINO, "password": "secreto1"},
        headers=auth_headers(MANAGER),
    )

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "DUPLICATE_ERROR"


@pytest.mark.parametrize(
    "email,role,store",
    [
        ("gerencia@barbour.co", StaffRole.MANAGER, None),
        ("Gerencia.Bogota@barbour.co", StaffRole.MANAGER, None),
        ("andino@barbour.co", StaffRole.STORE, "andino"),
        ("Calle90@barbour.co", StaffRole.STORE, "calle90"),
    ],
)
def test_infer_role_and_store(email, role, store):
    assert infer_role_and_store(email) == (role, store)
