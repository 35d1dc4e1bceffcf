"""Staff account models for MongoDB.

Collection: staff_accounts
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class StaffRole(str, Enum):
    """Staff role enum."""

    MANAGER = "manager"  # Sees every store
    STORE = "store"  # Sees and completes surveys of one store


class StaffAccount(BaseModel):
    """Staff account document model for MongoDB."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str | None = Field(None, alias="_id")
    email: str
    password_hash: str
    role: StaffRole = StaffRole.STORE
    store: str | None = None  # None for managers

    is_active: bool = True
    last_login_at: datetime | None = None
    password_changed_at: datetime | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_manager(self) -> bool:
        return self.role == StaffRole.MANAGER

    def __repr__(self) -> str:
        return f"<StaffAccount {self.email}>"
