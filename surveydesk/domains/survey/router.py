"""Survey API routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from motor.motor_asyncio import AsyncIOMotorDatabase

from surveydesk.db.mongodb import get_mongodb
from surveydesk.dependencies.auth import CurrentViewer
from surveydesk.domains.survey.aggregation import ALL_STORES
from surveydesk.domains.survey.repository import MongoSurveyRepository, SurveyRepositoryInterface
from surveydesk.domains.survey.schemas import (
    DashboardResponse,
    DashboardRow,
    QuestionCatalog,
    SurveyComplete,
    SurveyResponse,
    SurveySubmit,
)
from surveydesk.domains.survey.service import SurveyService

router = APIRouter(prefix="/surveys")


def get_survey_repository(
    db: AsyncIOMotorDatabase = Depends(get_mongodb),
) -> SurveyRepositoryInterface:
    """Dependency injection for the survey repository."""
    return MongoSurveyRepository(db)


def get_survey_service(
    repository: SurveyRepositoryInterface = Depends(get_survey_repository),
) -> SurveyService:
    """Dependency injection for SurveyService."""
    return SurveyService(repository)


# ============================================================
# Public Endpoints (customer survey)
# ============================================================


@router.get(
    "/questions",
    response_model=QuestionCatalog,
    summary="Get survey questions",
    description="Ordered steps of the customer survey for a store link.",
)
async def get_questions(
    service: Annotated[SurveyService, Depends(get_survey_service)],
    store: str | None = Query(None, description="Store slug from the survey link"),
):
    """Get the survey question catalogue."""
    return service.question_catalog(store)


@router.post(
    "",
    response_model=SurveyResponse,
    status_code=201,
    summary="Submit survey",
    description="Score and save a customer's answers as a pending survey.",
)
async def submit_survey(
    data: SurveySubmit,
    service: Annotated[SurveyService, Depends(get_survey_service)],
    store: str | None = Query(None, description="Store slug from the survey link"),
):
    """Submit a customer survey."""
    record = await service.submit(store, data)
    return SurveyResponse(**record.model_dump(exclude={"id"}), id=record.id)


# ============================================================
# JWT Auth Endpoints (staff dashboard)
# ============================================================


@router.get(
    "/dashboard",
    response_model=DashboardResponse,
    summary="Get dashboard",
    description="Surveys and KPIs visible to the signed-in staff member.",
)
async def get_dashboard(
    viewer: CurrentViewer,
    service: Annotated[SurveyService, Depends(get_survey_service)],
    month: str | None = Query(
        None,
        pattern=r"^(\d{4}-\d{2})?$",
        description="YYYY-MM; empty for every month; omitted for the newest month",
    ),
    store: str = Query(ALL_STORES, description="Store slug or 'all' (managers only)"),
):
    """Get the filtered dashboard view."""
    return await service.get_dashboard(viewer, month=month, store_filter=store.lower())


@router.get(
    "/{survey_id}",
    response_model=DashboardRow,
    summary="Get survey",
    description="Details of one survey visible to the signed-in staff member.",
)
async def get_survey(
    survey_id: str,
    viewer: CurrentViewer,
    service: Annotated[SurveyService, Depends(get_survey_service)],
):
    """Get survey details."""
    record = await service.get_survey(survey_id, viewer)
    return service.to_row(record, viewer)


@router.post(
    "/{survey_id}/complete",
    response_model=DashboardRow,
    summary="Complete survey",
    description="Record the client name and turnaround days of a pending survey.",
)
async def complete_survey(
    survey_id: str,
    data: SurveyComplete,
    viewer: CurrentViewer,
    service: Annotated[SurveyService, Depends(get_survey_service)],
):
    """Complete a pending survey."""
    record = await service.complete(survey_id, data, viewer)
    return service.to_row(record, viewer)
