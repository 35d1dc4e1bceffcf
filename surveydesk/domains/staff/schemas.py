"""Staff domain schemas - request/response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from surveydesk.domains.staff.models import StaffRole


class StaffCreate(BaseModel):
    """Schema for creating a staff account.

    Role and store are inferred from the email when omitted.
    """

    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    role: StaffRole | None = None
    store: str | None = None


class PasswordChange(BaseModel):
    """Schema for changing the current staff member's password."""

    # Length is checked in the service so the message matches the dashboard's
    new_password: str = Field(..., max_length=128)


class StaffResponse(BaseModel):
    """Schema for staff account response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    role: StaffRole
    store: str | None
    is_active: bool
    last_login_at: datetime | None
    created_at: datetime
