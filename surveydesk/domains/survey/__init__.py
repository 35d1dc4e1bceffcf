"""Survey domain - customer answers, scoring and the staff dashboard."""

from surveydesk.domains.survey.models import SurveyRecord, SurveyStatus
from surveydesk.domains.survey.schemas import (
    DashboardResponse,
    SurveyComplete,
    SurveyResponse,
    SurveySubmit,
)
from surveydesk.domains.survey.service import SurveyService

__all__ = [
    "SurveyRecord",
    "SurveyStatus",
    "DashboardResponse",
    "SurveyComplete",
    "SurveyResponse",
    "SurveySubmit",
    "SurveyService",
]
