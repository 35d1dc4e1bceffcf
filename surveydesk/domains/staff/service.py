"""Staff domain service - staff account business logic.

This service contains pure business logic and depends on repository interfaces,
not on specific database implementations.
"""

import logging
from datetime import datetime, timezone

from surveydesk.core.config import settings
from surveydesk.core.exceptions import (
    DuplicateError,
    NotFoundError,
    ReauthenticationRequiredError,
    ValidationError,
)
from surveydesk.core.security import hash_password, is_recent_login
from surveydesk.domains.staff.models import StaffAccount, StaffRole
from surveydesk.domains.staff.repository import StaffRepositoryInterface
from surveydesk.domains.staff.schemas import StaffCreate

logger = logging.getLogger(__name__)


def infer_role_and_store(email: str) -> tuple[StaffRole, str | None]:
    """
    Derive the role and store from the account email.

    Manager mailboxes contain the manager marker (e.g. gerencia@...); every other
    mailbox is named after its store (e.g. andino@...).
    """
    email = email.lower()
    if settings.manager_email_marker in email:
        return StaffRole.MANAGER, None
    return StaffRole.STORE, email.split("@")[0]


class StaffService:
    """Staff account management service."""

    def __init__(self, repository: StaffRepositoryInterface):
        self._repository = repository

    async def create_account(self, data: StaffCreate) -> StaffAccount:
        """
        Create a staff account.

        Business rules:
        - Email must be unique
        - Store accounts must belong to a configured store

        Raises:
            DuplicateError: If email already exists
            ValidationError: If the store is unknown
        """
        email = data.email.lower()
        existing = await self._repository.get_by_email(email)
        if existing:
            raise DuplicateError("email", email)

        role, store = infer_role_and_store(email)
        if data.role is not None:
            role = data.role
        if data.store is not None:
            store = data.store.lower()
        if role == StaffRole.MANAGER:
            store = None
        elif store not in settings.accepted_stores:
            raise ValidationError(f"Unknown store '{store}'", {"store": store})

        account = StaffAccount(
            email=email,
            password_hash=hash_password(data.password),
            role=role,
            store=store,
        )
        account = await self._repository.create(account)
        logger.info(f"Created {role.value} account {email}")
        return account

    async def get_account(self, staff_id: str) -> StaffAccount:
        """
        Get staff account by ID.

        Raises:
            NotFoundError: If account not found
        """
        account = await self._repository.get_by_id(staff_id)
        if not account:
            raise NotFoundError("Staff account", staff_id)
        return account

    async def change_password(
        self,
        staff_id: str,
        new_password: str,
        auth_time: int | None,
    ) -> StaffAccount:
        """
        Change the signed-in staff member's password.

        Business rules:
        - Minimum length applies
        - Credentials must have been verified recently; otherwise the staff member
          must sign out and back in. There is no silent re-authentication.

        Raises:
            ValidationError: If the password is too short
            ReauthenticationRequiredError: If the sign-in is too old
        """
        if len(new_password) < settings.min_password_length:
            raise ValidationError(
                f"Password must be at least {settings.min_password_length} characters"
            )
        if not is_recent_login(auth_time):
            raise ReauthenticationRequiredError()

        account = await self.get_account(staff_id)
        await self._repository.update_fields(
            staff_id,
            {
                "password_hash": hash_password(new_password),
                "password_changed_at": datetime.now(timezone.utc),
            },
        )
        logger.info(f"Password changed for {account.email}")
        return account
