"""
Authentication and authorization.

- Passwords are bcrypt hashes; tokens are HS256 JWTs signed with
  ``settings.SECRET_KEY``.
- ``get_current_user`` resolves the bearer token to a ``User`` or answers
  401.
- ``can_access`` is the single access policy: each ``Action`` requires
  one role.  ``require(action)`` wraps it as a route dependency that
  answers 403, and it runs before any body or query validation.
"""
import logging
import uuid
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

import bcrypt
import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from article_admin.config import settings
from article_admin.database import get_db
from article_admin.errors import AuthenticationError
from article_admin.models import ROLE_ADMIN, User
from article_admin.repositories import user as user_repository

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
UNAUTHENTICATED_DETAIL = "Authentication credentials were not provided or are invalid."
FORBIDDEN_DETAIL = "Access denied."
BCRYPT_MAX_PASSWORD_BYTES = 72

bearer_scheme = HTTPBearer(auto_error=False)


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------

def hash_password(raw_password: str) -> str:
    """Hash a raw password using bcrypt and return the utf-8 string."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(raw_password.encode(), salt).decode()


def verify_password(raw_password: str, password_hash: str) -> bool:
    encoded = raw_password.encode()
    # bcrypt only accepts up to 72 bytes; no stored hash can match more.
    if not password_hash or len(encoded) > BCRYPT_MAX_PASSWORD_BYTES:
        return False
    return bcrypt.checkpw(encoded, password_hash.encode())


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------

def create_access_token(user: User) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user.id),
        "username": user.username,
        "roles": sorted(user.role_set),
        "jti": str(uuid.uuid4()),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(minutes=settings.ACCESS_TOKEN_TTL_MINUTES)).timestamp()),
        "type": "access",
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.ExpiredSignatureError as exc:
        raise AuthenticationError("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise AuthenticationError("Invalid token") from exc

    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")
    return payload


def _unauthenticated() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHENTICATED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise _unauthenticated()

    try:
        payload = decode_token(credentials.credentials)
        user_id = int(payload["sub"])
    except (AuthenticationError, KeyError, ValueError) as exc:
        logger.info("Rejected bearer token: %s", exc)
        raise _unauthenticated() from exc

    user = await user_repository.find(db, user_id)
    if user is None:
        raise _unauthenticated()
    return user


# ---------------------------------------------------------------------------
# Access policy
# ---------------------------------------------------------------------------

class Action(str, Enum):
    ARTICLE_LIST = "article:list"
    ARTICLE_CREATE = "article:create"
    ARTICLE_UPDATE = "article:update"
    ARTICLE_DELETE = "article:delete"


ACCESS_POLICY: dict[Action, str] = {
    Action.ARTICLE_LIST: ROLE_ADMIN,
    Action.ARTICLE_CREATE: ROLE_ADMIN,
    Action.ARTICLE_UPDATE: ROLE_ADMIN,
    Action.ARTICLE_DELETE: ROLE_ADMIN,
}


def can_access(user: User | None, action: Action) -> bool:
    if user is None:
        return False
    required = ACCESS_POLICY.get(action)
    if required is None:
        return False
    return required in user.role_set


def require(action: Action):
    """Route dependency: the current user must be allowed to perform *action*."""

    async def dependency(user: User = Depends(get_current_user)) -> User:
        if not can_access(user, action):
            logger.info("User %s denied %s", user.username, action.value)
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_DETAIL)
        return user

    return dependency
