"""Dashboard aggregation - store visibility, month buckets and KPIs.

Records arrive newest-first, as the repository returns them. Every function here is
pure; the service layer fetches and the router renders.
"""

from datetime import datetime, timezone
from typing import Iterable, Sequence
from zoneinfo import ZoneInfo

from surveydesk.domains.survey.models import CamelModel, SurveyRecord, SurveyStatus
from surveydesk.domains.survey.scoring import round_one

ALL_STORES = "all"
SCORE_ALERT_THRESHOLD = 4
LOW_SCORE_THRESHOLD = 3

MONTH_NAMES_ES = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


class Viewer(CamelModel):
    """Who is looking at the dashboard."""

    is_manager: bool = False
    store_scope: str | None = None


class SurveyKPIs(CamelModel):
    """Headline figures for the filtered record set."""

    survey_count: int = 0
    avg_global_score: float = 0.0
    score_alert: bool = False
    pending_count: int = 0
    avg_days: float = 0.0


def month_key(timestamp: datetime, tz: ZoneInfo) -> str:
    """Bucket a timestamp as YYYY-MM in the local calendar."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    local = timestamp.astimezone(tz)
    return f"{local.year}-{local.month:02d}"


def month_label(key: str) -> str:
    """Display label for a month bucket, e.g. 2024-01 -> ENERO DE 2024."""
    year, month = key.split("-")
    return f"{MONTH_NAMES_ES[int(month) - 1]} de {year}".upper()


def can_view(record: SurveyRecord, viewer: Viewer) -> bool:
    """Managers see every store; store staff only ever see their own store."""
    if viewer.is_manager:
        return True
    return viewer.store_scope is not None and record.store == viewer.store_scope


def visible_records(
    records: Iterable[SurveyRecord],
    viewer: Viewer,
    store_filter: str = ALL_STORES,
) -> list[SurveyRecord]:
    """
    Apply store visibility.

    The store filter only narrows a manager's view. For store staff it is ignored and
    the view stays pinned to their own store.
    """
    visible = []
    for record in records:
        if not can_view(record, viewer):
            continue
        if viewer.is_manager and store_filter != ALL_STORES and record.store != store_filter:
            continue
        visible.append(record)
    return visible


def available_months(
    records: Iterable[SurveyRecord],
    viewer: Viewer,
    tz: ZoneInfo,
) -> list[str]:
    """Distinct month buckets the viewer could see, in fetch order."""
    months: list[str] = []
    for record in records:
        if not can_view(record, viewer):
            continue
        key = month_key(record.timestamp, tz)
        if key not in months:
            months.append(key)
    return months


def resolve_month(selected_month: str | None, months: Sequence[str]) -> str:
    """
    Pick the month to filter by.

    None means nothing was chosen yet, so the newest month present is used.
    An empty string means "every month".
    """
    if selected_month is None:
        return months[0] if months else ""
    return selected_month


def filter_records(
    records: Iterable[SurveyRecord],
    viewer: Viewer,
    selected_month: str,
    store_filter: str,
    tz: ZoneInfo,
) -> list[SurveyRecord]:
    """Records matching both the store scope and the month bucket."""
    scoped = visible_records(records, viewer, store_filter)
    if not selected_month:
        return scoped
    return [r for r in scoped if month_key(r.timestamp, tz) == selected_month]


def _score_for_average(record: SurveyRecord) -> float:
    # Records from before scoring existed only have the star rating
    return record.global_score or record.presentacion or 0


def compute_kpis(records: Sequence[SurveyRecord]) -> SurveyKPIs:
    """Compute dashboard KPIs. Means over empty sets are 0."""
    survey_count = len(records)

    avg_global_score = 0.0
    if survey_count:
        avg_global_score = round_one(
            sum(_score_for_average(r) for r in records) / survey_count
        )

    completed = [r for r in records if r.status == SurveyStatus.COMPLETED]
    avg_days = 0.0
    if completed:
        avg_days = round_one(sum(r.days_process for r in completed) / len(completed))

    return SurveyKPIs(
        survey_count=survey_count,
        avg_global_score=avg_global_score,
        score_alert=survey_count > 0 and avg_global_score < SCORE_ALERT_THRESHOLD,
        pending_count=sum(1 for r in records if r.status == SurveyStatus.PENDING),
        avg_days=avg_days,
    )


def is_low_score(record: SurveyRecord) -> bool:
    """Rows under 3 are highlighted as low satisfaction."""
    return record.global_score is not None and record.global_score < LOW_SCORE_THRESHOLD
