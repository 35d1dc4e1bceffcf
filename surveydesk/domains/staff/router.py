"""Staff API router - account endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from surveydesk.db.mongodb import get_mongodb
from surveydesk.dependencies.auth import CurrentStaff, ManagerOnly
from surveydesk.domains.auth.state import (
    AuthEvent,
    AuthEventType,
    AuthStateNotifier,
    get_auth_notifier,
)
from surveydesk.domains.staff.repository import MongoStaffRepository, StaffRepositoryInterface
from surveydesk.domains.staff.schemas import PasswordChange, StaffCreate, StaffResponse
from surveydesk.domains.staff.service import StaffService

router = APIRouter()


def get_staff_repository(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),
) -> StaffRepositoryInterface:
    """Dependency injection for the staff repository."""
    return MongoStaffRepository(db)


def get_staff_service(
    repository: StaffRepositoryInterface = Depends(get_staff_repository),
) -> StaffService:
    """Dependency injection for StaffService."""
    return StaffService(repository)


@router.get("/me", response_model=StaffResponse)
async def get_me(
    current_staff: CurrentStaff,
    service: Annotated[StaffService, Depends(get_staff_service)],
):
    """
    Get current staff member's account.
    """
    account = await service.get_account(current_staff["staff_id"])
    return StaffResponse.model_validate(account)


@router.put("/me/password")
async def change_my_password(
    data: PasswordChange,
    current_staff: CurrentStaff,
    service: Annotated[StaffService, Depends(get_staff_service)],
    notifier: Annotated[AuthStateNotifier, Depends(get_auth_notifier)],
):
    """
    Change current staff member's password.

    Requires a recent sign-in; otherwise sign out and back in first.
    """
    account = await service.change_password(
        staff_id=current_staff["staff_id"],
        new_password=data.new_password,
        auth_time=current_staff["auth_time"],
    )
    await notifier.publish(
        AuthEvent(
            type=AuthEventType.PASSWORD_CHANGED,
            staff_id=account.id,
            email=account.email,
        )
    )
    return {"message": "Password updated successfully"}


@router.post("", response_model=StaffResponse, status_code=201)
async def create_staff(
    data: StaffCreate,
    current_staff: ManagerOnly,
    service: Annotated[StaffService, Depends(get_staff_service)],
):
    """
    Create a staff account.

    Requires manager role.
    """
    account = await service.create_account(data)
    return StaffResponse.model_validate(account)
