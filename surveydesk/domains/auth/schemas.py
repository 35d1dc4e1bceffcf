"""Auth domain schemas - request/response models."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field

Persistence = Literal["local", "session"]


class LoginRequest(BaseModel):
    """Login request schema."""

    email: EmailStr
    password: str = Field(..., min_length=1, max_length=128)
    remember: bool = Field(True, description="Keep the session across browser restarts")


class LoginResponse(BaseModel):
    """Login response schema."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(..., description="Access token expiration in seconds")
    persistence: Persistence


class RefreshRequest(BaseModel):
    """Token refresh request schema."""

    refresh_token: str


class RefreshResponse(BaseModel):
    """Token refresh response schema."""

    access_token: str
    token_type: str = "bearer"
    expires_in: int


class SessionResponse(BaseModel):
    """Current identity as seen by the dashboard."""

    signed_in: bool
    staff_id: str | None = None
    email: str | None = None
    role: str | None = None
    store: str | None = None
    is_manager: bool = False


class LogoutRequest(BaseModel):
    """Logout request schema."""

    refresh_token: str | None = None
