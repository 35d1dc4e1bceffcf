"""Auth domain service - authentication business logic."""

from datetime import datetime, timezone

from surveydesk.core.config import settings
from surveydesk.core.exceptions import InvalidCredentialsError, InvalidTokenError
from surveydesk.core.security import (
    create_access_token,
    create_refresh_token,
    get_token_jti,
    verify_password,
    verify_refresh_token,
)
from surveydesk.db.redis import RedisCache
from surveydesk.domains.auth.state import AuthEvent, AuthEventType, AuthStateNotifier
from surveydesk.domains.staff.models import StaffAccount
from surveydesk.domains.staff.repository import StaffRepositoryInterface


def token_claims(account: StaffAccount) -> dict:
    """Identity claims carried by access tokens."""
    return {
        "sub": str(account.id),
        "email": account.email,
        "role": account.role,
        "store": account.store,
    }


class AuthService:
    """Authentication service."""

    def __init__(
        self,
        repository: StaffRepositoryInterface,
        notifier: AuthStateNotifier,
        blacklist: RedisCache,
    ):
        self._repository = repository
        self._notifier = notifier
        self._blacklist = blacklist

    async def login(self, email: str, password: str, remember: bool) -> tuple[str, str, str]:
        """
        Authenticate staff and return tokens.

        Args:
            email: Staff email
            password: Plain text password
            remember: Durable ("local") session if True, browser session otherwise

        Returns:
            Tuple of (access_token, refresh_token, persistence)

        Raises:
            InvalidCredentialsError: If email or password is wrong
        """
        account = await self._repository.get_by_email(email.lower())
        if not account or not account.is_active:
            raise InvalidCredentialsError()

        if not verify_password(password, account.password_hash):
            raise InvalidCredentialsError()

        now = datetime.now(timezone.utc)
        await self._repository.update_fields(account.id, {"last_login_at": now})

        persistence = "local" if remember else "session"
        claims = token_claims(account)
        access_token = create_access_token(claims, auth_time=now)
        refresh_token = create_refresh_token(claims, persistence=persistence, auth_time=now)

        await self._notifier.publish(
            AuthEvent(
                type=AuthEventType.SIGNED_IN,
                staff_id=account.id,
                email=account.email,
                persistence=persistence,
            )
        )
        return access_token, refresh_token, persistence

    async def refresh_tokens(self, refresh_token: str) -> str:
        """
        Issue a new access token from a refresh token.

        The original sign-in time is carried over so that refreshing does not count
        as a recent sign-in.

        Raises:
            InvalidTokenError: If refresh token is invalid, expired or revoked
        """
        payload = verify_refresh_token(refresh_token)

        if await self._blacklist.exists(payload.get("jti", "")):
            raise InvalidTokenError("Token has been revoked")

        staff_id = payload.get("sub")
        if not staff_id:
            raise InvalidTokenError("Invalid token payload")

        account = await self._repository.get_by_id(staff_id)
        if not account or not account.is_active:
            raise InvalidTokenError("Staff account not found or inactive")

        auth_time = datetime.fromtimestamp(payload["auth_time"], tz=timezone.utc)
        return create_access_token(token_claims(account), auth_time=auth_time)

    async def logout(
        self,
        staff_id: str,
        email: str,
        jti: str,
        refresh_token: str | None = None,
    ) -> None:
        """
        Sign out by blacklisting the access token and, if given, the refresh token.

        Args:
            staff_id: Staff ID
            email: Staff email
            jti: JWT ID from the access token payload
            refresh_token: Refresh token held by the signing-out client
        """
        # Blacklist with TTL equal to token expiration
        ttl = settings.jwt_access_token_expire_minutes * 60
        await self._blacklist.set(jti, "1", ttl=ttl)

        if refresh_token:
            refresh_jti = get_token_jti(refresh_token)
            if refresh_jti:
                refresh_ttl = settings.jwt_refresh_token_expire_days * 24 * 60 * 60
                await self._blacklist.set(refresh_jti, "1", ttl=refresh_ttl)

        await self._notifier.publish(
            AuthEvent(type=AuthEventType.SIGNED_OUT, staff_id=staff_id, email=email)
        )
