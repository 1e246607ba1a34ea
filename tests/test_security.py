"""Access policy, token handling and the login endpoint."""
from datetime import datetime, timedelta, timezone

import jwt
import pytest
from httpx import AsyncClient

from article_admin.config import settings
from article_admin.errors import AuthenticationError
from article_admin.models import ROLE_ADMIN, ROLE_USER, User
from article_admin.security import (
    ACCESS_POLICY,
    ALGORITHM,
    Action,
    can_access,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)


def _user(roles: list[str], user_id: int = 1) -> User:
    return User(id=user_id, username="someone", first_name="Some", last_name="One", roles=roles, password_hash="")


# ---------------------------------------------------------------------------
# can_access
# ---------------------------------------------------------------------------

@pytest.mark.parametrize("action", list(Action))
def test_admin_can_perform_every_action(action):
    assert can_access(_user([ROLE_ADMIN]), action) is True


@pytest.mark.parametrize("action", list(Action))
def test_default_role_cannot_perform_admin_actions(action):
    assert can_access(_user([]), action) is False


def test_anonymous_is_never_allowed():
    assert can_access(None, Action.ARTICLE_LIST) is False


def test_every_action_has_a_policy_entry():
    assert set(ACCESS_POLICY) == set(Action)


def test_role_user_is_implied():
    assert _user([]).role_set == {ROLE_USER}
    assert _user([ROLE_ADMIN]).role_set == {ROLE_USER, ROLE_ADMIN}


# ---------------------------------------------------------------------------
# Passwords and tokens
# ---------------------------------------------------------------------------

def test_password_hash_round_trip():
    hashed = hash_password("s3cret")
    assert hashed != "s3cret"
    assert verify_password("s3cret", hashed) is True
    assert verify_password("wrong", hashed) is False
    assert verify_password("s3cret", "") is False


def test_password_longer_than_bcrypt_limit_never_matches():
    hashed = hash_password("x" * 72)
    assert verify_password("x" * 72, hashed) is True
    assert verify_password("x" * 100, hashed) is False
    assert verify_password("\u00e9" * 40, hashed) is False


def test_default_secret_key_is_long_enough_for_hs256():
    assert len(settings.SECRET_KEY.encode()) >= 32


def test_token_carries_identity_and_roles():
    payload = decode_token(create_access_token(_user([ROLE_ADMIN], user_id=7)))
    assert payload["sub"] == "7"
    assert payload["roles"] == [ROLE_ADMIN, ROLE_USER]
    assert payload["type"] == "access"


def test_expired_token_is_rejected():
    now = datetime.now(timezone.utc)
    token = jwt.encode(
        {"sub": "1", "type": "access", "exp": int((now - timedelta(minutes=1)).timestamp())},
        settings.SECRET_KEY,
        algorithm=ALGORITHM,
    )
    with pytest.raises(AuthenticationError, match="expired"):
        decode_token(token)


def test_token_signed_with_another_key_is_rejected():
    token = jwt.encode({"sub": "1", "type": "access"}, "another-secret-key-of-at-least-32-bytes", algorithm=ALGORITHM)
    with pytest.raises(AuthenticationError):
        decode_token(token)


def test_wrong_token_type_is_rejected():
    token = jwt.encode({"sub": "1", "type": "refresh"}, settings.SECRET_KEY, algorithm=ALGORITHM)
    with pytest.raises(AuthenticationError, match="type"):
        decode_token(token)


@pytest.mark.asyncio
async def test_token_for_deleted_user_returns_401(async_client: AsyncClient, users):
    token = create_access_token(_user([ROLE_ADMIN], user_id=12345))
    resp = await async_client.get("/api/admin/articles", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Login endpoint
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_login_returns_usable_token(async_client: AsyncClient, users):
    resp = await async_client.post("/api/login", json={"username": "admin", "password": "admin"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["tokenType"] == "bearer"

    resp = await async_client.get(
        "/api/admin/articles", headers={"Authorization": f"Bearer {body['token']}"}
    )
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_login_as_regular_user_is_forbidden_on_admin_routes(async_client: AsyncClient, users):
    resp = await async_client.post("/api/login", json={"username": "user", "password": "user"})
    token = resp.json()["token"]

    resp = await async_client.get("/api/admin/articles", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "username,password",
    [("admin", "wrong"), ("nobody", "admin"), ("admin", "x" * 100)],
)
async def test_login_with_bad_credentials_returns_401(async_client: AsyncClient, users, username, password):
    resp = await async_client.post("/api/login", json={"username": username, "password": password})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid credentials."
