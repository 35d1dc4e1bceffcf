"""Survey schemas for API requests/responses."""

from datetime import date, datetime

from pydantic import Field, field_validator

from surveydesk.domains.survey.aggregation import SurveyKPIs, Viewer
from surveydesk.domains.survey.models import CamelModel, SurveyStatus


class SurveySubmit(CamelModel):
    """Schema for a customer's survey answers."""

    tiempo: str = Field("", max_length=100, description="Delivery timing answer")
    presentacion: int = Field(0, ge=0, le=5, description="Presentation stars (1-5)")
    calidad: str = Field("", max_length=100, description="Quality answer")
    confirmacion: bool = Field(False, description="Customer confirmed receiving the garment")


class SurveyComplete(CamelModel):
    """Schema for staff completing a pending survey."""

    client_name: str | None = Field(None, max_length=200)
    reception_date: date | None = None
    delivery_date: date | None = None

    @field_validator("reception_date", "delivery_date", mode="before")
    @classmethod
    def blank_date_is_unset(cls, v):
        # Date inputs post "" until a date is picked
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SurveyResponse(CamelModel):
    """Survey record response."""

    id: str
    store: str
    timestamp: datetime
    tiempo: str
    presentacion: int
    calidad: str
    confirmacion: bool
    global_score: float | None = None
    status: SurveyStatus
    client_name: str = ""
    days_process: int = 0


class DashboardRow(SurveyResponse):
    """Survey row with dashboard display flags."""

    low_score: bool = False
    can_complete: bool = False


class MonthOption(CamelModel):
    """Month selector entry."""

    key: str
    label: str


class DashboardResponse(CamelModel):
    """Filtered dashboard view."""

    viewer: Viewer
    months: list[MonthOption]
    selected_month: str = ""
    store_filter: str
    stores: list[str]
    kpis: SurveyKPIs
    records: list[DashboardRow]


class QuestionStep(CamelModel):
    """One step of the multi-step survey form."""

    key: str
    title: str
    kind: str  # "intro" | "choice" | "stars" | "confirm" | "done"
    options: list[str] = Field(default_factory=list)
    label: str = ""  # checkbox text of a confirm step


class QuestionCatalog(CamelModel):
    """The ordered survey steps shown to the customer."""

    store: str
    steps: list[QuestionStep]
