"""Auth API router - login, token refresh, logout, session."""

from typing import Annotated

from fastapi import APIRouter, Depends

from surveydesk.core.config import settings
from surveydesk.db.redis import RedisCache
from surveydesk.dependencies.auth import (
    CurrentStaff,
    OptionalStaff,
    get_token_blacklist,
)
from surveydesk.domains.auth.schemas import (
    LoginRequest,
    LoginResponse,
    LogoutRequest,
    RefreshRequest,
    RefreshResponse,
    SessionResponse,
)
from surveydesk.domains.auth.service import AuthService
from surveydesk.domains.auth.state import AuthStateNotifier, get_auth_notifier
from surveydesk.domains.staff.models import StaffRole
from surveydesk.domains.staff.repository import StaffRepositoryInterface
from surveydesk.domains.staff.router import get_staff_repository

router = APIRouter()


def get_auth_service(
    repository: Annotated[StaffRepositoryInterface, Depends(get_staff_repository)],
    notifier: Annotated[AuthStateNotifier, Depends(get_auth_notifier)],
    blacklist: Annotated[RedisCache, Depends(get_token_blacklist)],
) -> AuthService:
    """Dependency injection for AuthService."""
    return AuthService(repository, notifier, blacklist)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Login with email and password.

    `remember` keeps the session across browser restarts ("local" persistence);
    otherwise the refresh token only lives for a browser session.
    """
    access_token, refresh_token, persistence = await service.login(
        email=request.email,
        password=request.password,
        remember=request.remember,
    )

    return LoginResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
        persistence=persistence,
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    request: RefreshRequest,
    service: Annotated[AuthService, Depends(get_auth_service)],
):
    """
    Refresh access token using refresh token.
    """
    access_token = await service.refresh_tokens(refresh_token=request.refresh_token)

    return RefreshResponse(
        access_token=access_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


@router.post("/logout")
async def logout(
    current_staff: CurrentStaff,
    service: Annotated[AuthService, Depends(get_auth_service)],
    request: LogoutRequest | None = None,
):
    """
    Logout current session.

    Blacklists the current access token and, when sent, the refresh token.
    """
    await service.logout(
        staff_id=current_staff["staff_id"],
        email=current_staff["email"],
        jti=current_staff["jti"],
        refresh_token=request.refresh_token if request else None,
    )
    return {"message": "Logged out successfully"}


@router.get("/session", response_model=SessionResponse)
async def get_session(current_staff: OptionalStaff):
    """
    Current identity, or signed_in=false when there is no valid session.
    """
    if not current_staff:
        return SessionResponse(signed_in=False)

    return SessionResponse(
        signed_in=True,
        staff_id=current_staff["staff_id"],
        email=current_staff["email"],
        role=current_staff["role"],
        store=current_staff["store"],
        is_manager=current_staff["role"] == StaffRole.MANAGER.value,
    )
