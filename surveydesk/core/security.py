"""Security utilities - JWT, password hashing."""

import hashlib
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from surveydesk.core.config import settings
from surveydesk.core.exceptions import InvalidTokenError, TokenExpiredError


def _prepare_password(password: str) -> bytes:
    """Prepare password for bcrypt (handle >72 bytes)."""
    password_bytes = password.encode("utf-8")
    if len(password_bytes) > 72:
        # Hash long passwords with SHA256 first
        return hashlib.sha256(password_bytes).hexdigest().encode("utf-8")
    return password_bytes


def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    salt = bcrypt.gensalt()
    return bcrypt.hashpw(_prepare_password(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return bcrypt.checkpw(
        _prepare_password(plain_password),
        hashed_password.encode("utf-8"),
    )


def create_access_token(
    data: dict[str, Any],
    auth_time: datetime | None = None,
    expires_delta: timedelta | None = None,
) -> str:
    """
    Create a JWT access token.

    Args:
        data: Payload data (sub, email, role, store)
        auth_time: When the credentials were last verified; defaults to now
        expires_delta: Custom expiration time

    Returns:
        Encoded JWT token string
    """
    to_encode = data.copy()
    now = datetime.now(timezone.utc)

    if expires_delta:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.jwt_access_token_expire_minutes)

    to_encode.update({
        "exp": expire,
        "iat": now,
        "auth_time": int((auth_time or now).timestamp()),
        "jti": str(uuid.uuid4()),  # JWT ID for blacklisting
        "type": "access",
    })

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def create_refresh_token(
    data: dict[str, Any],
    persistence: str,
    auth_time: datetime | None = None,
) -> str:
    """
    Create a JWT refresh token.

    "local" persistence survives browser restarts and lives for days;
    "session" persistence lives for a few hours.
    """
    now = datetime.now(timezone.utc)
    if persistence == "local":
        expire = now + timedelta(days=settings.jwt_refresh_token_expire_days)
    else:
        expire = now + timedelta(hours=settings.jwt_session_refresh_expire_hours)

    to_encode = {
        "sub": data.get("sub"),  # Only include staff ID
        "persistence": persistence,
        "exp": expire,
        "iat": now,
        "auth_time": int((auth_time or now).timestamp()),
        "jti": str(uuid.uuid4()),
        "type": "refresh",
    }

    return jwt.encode(
        to_encode,
        settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a JWT token.

    Raises:
        TokenExpiredError: If token has expired
        InvalidTokenError: If token is invalid
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
        return payload
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        raise InvalidTokenError(message=str(e))


def verify_access_token(token: str) -> dict[str, Any]:
    """Verify an access token and return payload."""
    payload = decode_token(token)

    if payload.get("type") != "access":
        raise InvalidTokenError(message="Invalid token type")

    return payload


def verify_refresh_token(token: str) -> dict[str, Any]:
    """Verify a refresh token and return payload."""
    payload = decode_token(token)

    if payload.get("type") != "refresh":
        raise InvalidTokenError(message="Invalid token type")

    return payload


def get_token_jti(token: str) -> str | None:
    """
    Get the JTI (JWT ID) from a token without full verification.
    Used for blacklisting tokens.
    """
    try:
        payload = jwt.decode(
            token,
            options={"verify_signature": False},
        )
        return payload.get("jti")
    except jwt.InvalidTokenError:
        return None


def is_recent_login(auth_time: int | None, max_age_minutes: int | None = None) -> bool:
    """Check whether credentials were verified within the allowed window."""
    if auth_time is None:
        return False
    if max_age_minutes is None:
        max_age_minutes = settings.recent_login_max_age_minutes
    signed_in_at = datetime.fromtimestamp(auth_time, tz=timezone.utc)
    return datetime.now(timezone.utc) - signed_in_at <= timedelta(minutes=max_age_minutes)
