"""Survey record models for MongoDB.

All records live in one flat collection: surveys
Documents use camelCase keys (globalScore, clientName, daysProcess).
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SurveyStatus(str, Enum):
    """Survey status enum."""

    PENDING = "pending"  # Submitted by the customer, awaiting staff
    COMPLETED = "completed"  # Staff supplied client name and turnaround days


# Answer options shown to the customer
TIMING_EARLY = "Antes de la fecha"
TIMING_ON_TIME = "Justo a tiempo"
TIMING_DELAYED = "Hubo demora"
TIMING_OPTIONS = [TIMING_EARLY, TIMING_ON_TIME, TIMING_DELAYED]

QUALITY_RENEWED = "Uniforme y renovado"
QUALITY_EXPECTED_MORE = "Cumple, pero esperaba más"
QUALITY_UNSATISFIED = "No estoy satisfecho"
QUALITY_OPTIONS = [QUALITY_RENEWED, QUALITY_EXPECTED_MORE, QUALITY_UNSATISFIED]


class CamelModel(BaseModel):
    """Reads and writes the camelCase keys the survey UI and documents use."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SurveyRecord(CamelModel):
    """Survey record document model for MongoDB.

    Collection: surveys
    """

    model_config = ConfigDict(use_enum_values=True)

    id: str | None = Field(None, alias="_id")
    store: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Answers
    tiempo: str = ""
    presentacion: int = Field(0, ge=0, le=5)
    calidad: str = ""
    confirmacion: bool = False

    # Legacy records were stored before scoring existed
    global_score: float | None = None

    # Staff completion
    status: SurveyStatus = SurveyStatus.PENDING
    client_name: str = ""
    days_process: int = Field(0, ge=0)

    @property
    def is_pending(self) -> bool:
        return self.status == SurveyStatus.PENDING
