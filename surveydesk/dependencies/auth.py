"""Authentication dependencies for FastAPI."""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from surveydesk.core.exceptions import (
    AuthenticationError,
    InsufficientPermissionsError,
    InvalidTokenError,
)
from surveydesk.core.security import verify_access_token
from surveydesk.db.redis import RedisCache, jwt_blacklist
from surveydesk.domains.staff.models import StaffRole
from surveydesk.domains.survey.aggregation import Viewer


# JWT Bearer scheme
bearer_scheme = HTTPBearer(auto_error=False)


def get_token_blacklist() -> RedisCache:
    """Revoked token ids, keyed by jti."""
    return jwt_blacklist


async def get_current_staff(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    blacklist: Annotated[RedisCache, Depends(get_token_blacklist)],
) -> dict:
    """
    Verify JWT token and return current staff info.

    Returns:
        dict with staff_id, email, role, store, jti, auth_time
    """
    if not credentials:
        raise AuthenticationError("Authorization header required")

    payload = verify_access_token(credentials.credentials)

    staff_id = payload.get("sub")
    if not staff_id:
        raise InvalidTokenError("Invalid token payload")

    # Check if token is blacklisted
    if await blacklist.exists(payload["jti"]):
        raise InvalidTokenError("Token has been revoked")

    return {
        "staff_id": staff_id,
        "email": payload.get("email"),
        "role": payload.get("role"),
        "store": payload.get("store"),
        "jti": payload["jti"],
        "auth_time": payload.get("auth_time"),
    }


async def get_current_staff_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    blacklist: Annotated[RedisCache, Depends(get_token_blacklist)],
) -> dict | None:
    """
    Get current staff if a valid token is provided, otherwise return None.
    Used to observe the signed-in/signed-out state.
    """
    if not credentials:
        return None

    try:
        return await get_current_staff(credentials, blacklist)
    except AuthenticationError:
        return None


def get_viewer(current_staff: Annotated[dict, Depends(get_current_staff)]) -> Viewer:
    """Dashboard visibility scope for the signed-in staff member."""
    is_manager = current_staff["role"] == StaffRole.MANAGER.value
    return Viewer(
        is_manager=is_manager,
        store_scope=None if is_manager else current_staff["store"],
    )


def require_roles(*allowed_roles: StaffRole):
    """
    Dependency factory that checks if current staff has required role.

    Usage:
        @router.post("/store-only")
        async def endpoint(staff: dict = Depends(require_roles(StaffRole.STORE))):
            ...
    """
    async def role_checker(
        current_staff: dict = Depends(get_current_staff),
    ) -> dict:
        if current_staff.get("role") not in [r.value for r in allowed_roles]:
            raise InsufficientPermissionsError(
                f"Required roles: {[r.value for r in allowed_roles]}"
            )
        return current_staff

    return role_checker


# Type aliases for cleaner dependency injection
CurrentStaff = Annotated[dict, Depends(get_current_staff)]
OptionalStaff = Annotated[dict | None, Depends(get_current_staff_optional)]
CurrentViewer = Annotated[Viewer, Depends(get_viewer)]
ManagerOnly = Annotated[dict, Depends(require_roles(StaffRole.MANAGER))]
