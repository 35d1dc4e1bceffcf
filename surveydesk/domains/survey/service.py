"""Survey service - business logic."""

import logging
from zoneinfo import ZoneInfo

from surveydesk.core.config import settings
from surveydesk.core.exceptions import (
    ConflictError,
    InsufficientPermissionsError,
    NotFoundError,
    UnknownStoreError,
    ValidationError,
)
from surveydesk.domains.survey.aggregation import (
    ALL_STORES,
    Viewer,
    available_months,
    can_view,
    compute_kpis,
    filter_records,
    is_low_score,
    month_label,
    resolve_month,
)
from surveydesk.domains.survey.completion import calculate_days_process, check_completion
from surveydesk.domains.survey.models import (
    QUALITY_OPTIONS,
    TIMING_OPTIONS,
    SurveyRecord,
    SurveyStatus,
)
from surveydesk.domains.survey.repository import SurveyRepositoryInterface
from surveydesk.domains.survey.schemas import (
    DashboardResponse,
    DashboardRow,
    MonthOption,
    QuestionCatalog,
    QuestionStep,
    SurveyComplete,
    SurveySubmit,
)
from surveydesk.domains.survey.scoring import calculate_global_score

logger = logging.getLogger(__name__)


class SurveyService:
    """Survey submission, dashboard and completion service."""

    def __init__(
        self,
        repository: SurveyRepositoryInterface,
        tz: ZoneInfo | None = None,
    ):
        self._repo = repository
        self._tz = tz or ZoneInfo(settings.local_timezone)

    def normalize_store(self, store: str | None) -> str:
        """
        Resolve the store a public survey is tagged with.

        Missing stores fall back to the default; unknown stores are rejected.
        """
        slug = (store or settings.default_store).strip().lower()
        if slug not in settings.accepted_stores:
            raise UnknownStoreError(slug)
        return slug

    def question_catalog(self, store: str | None) -> QuestionCatalog:
        """The survey steps, in the order the customer answers them."""
        return QuestionCatalog(
            store=self.normalize_store(store),
            steps=[
                QuestionStep(key="bienvenida", title="Bienvenido a Barbour Re-Waxing", kind="intro"),
                QuestionStep(
                    key="tiempo",
                    title="¿Tu prenda estuvo lista a tiempo?",
                    kind="choice",
                    options=TIMING_OPTIONS,
                ),
                QuestionStep(
                    key="presentacion",
                    title="Presentación de la prenda",
                    kind="stars",
                    options=["1", "2", "3", "4", "5"],
                ),
                QuestionStep(
                    key="calidad",
                    title="Calidad del encerado",
                    kind="choice",
                    options=QUALITY_OPTIONS,
                ),
                QuestionStep(
                    key="confirmacion",
                    title="Confirmación final",
                    kind="confirm",
                    label="Confirmo recibido.",
                ),
                QuestionStep(key="gracias", title="¡Gracias!", kind="done"),
            ],
        )

    async def submit(self, store: str | None, data: SurveySubmit) -> SurveyRecord:
        """
        Score and store a customer's survey.

        Args:
            store: Store slug from the survey link
            data: The customer's answers

        Returns:
            Created survey record (pending)

        Raises:
            IncompleteAnswersError: If a question is unanswered
            ValidationError: If receipt of the garment was not confirmed
        """
        slug = self.normalize_store(store)
        global_score = calculate_global_score(data.tiempo, data.presentacion, data.calidad)
        if not data.confirmacion:
            raise ValidationError("Please confirm you received your garment before submitting")

        record = SurveyRecord(
            store=slug,
            tiempo=data.tiempo,
            presentacion=data.presentacion,
            calidad=data.calidad,
            confirmacion=data.confirmacion,
            global_score=global_score,
        )
        record = await self._repo.create(record)
        logger.info(f"Survey {record.id} submitted for store {slug} (score {global_score})")
        return record

    async def _fetch_visible(self, viewer: Viewer) -> list[SurveyRecord]:
        if viewer.is_manager:
            return await self._repo.list_newest_first()
        if not viewer.store_scope:
            return []
        return await self._repo.list_newest_first(store=viewer.store_scope)

    async def get_dashboard(
        self,
        viewer: Viewer,
        month: str | None = None,
        store_filter: str = ALL_STORES,
    ) -> DashboardResponse:
        """
        Build the dashboard view for a staff member.

        Args:
            viewer: Manager flag and store scope of the signed-in staff
            month: YYYY-MM, "" for every month, or None for the newest month
            store_filter: Store slug or "all"; only honoured for managers

        Returns:
            Months, KPIs and the filtered rows
        """
        if not viewer.is_manager:
            store_filter = viewer.store_scope or ALL_STORES
        elif store_filter != ALL_STORES and store_filter not in settings.accepted_stores:
            raise UnknownStoreError(store_filter)

        records = await self._fetch_visible(viewer)
        months = available_months(records, viewer, self._tz)
        selected_month = resolve_month(month, months)
        filtered = filter_records(records, viewer, selected_month, store_filter, self._tz)

        return DashboardResponse(
            viewer=viewer,
            months=[MonthOption(key=m, label=month_label(m)) for m in months],
            selected_month=selected_month,
            store_filter=store_filter,
            stores=settings.stores,
            kpis=compute_kpis(filtered),
            records=[self.to_row(r, viewer) for r in filtered],
        )

    def to_row(self, record: SurveyRecord, viewer: Viewer) -> DashboardRow:
        """Render a record with its dashboard flags."""
        return DashboardRow(
            **record.model_dump(exclude={"id"}),
            id=record.id,
            low_score=is_low_score(record),
            can_complete=record.is_pending and not viewer.is_manager,
        )

    async def get_survey(self, survey_id: str, viewer: Viewer) -> SurveyRecord:
        """Get a survey the viewer is allowed to see."""
        record = await self._repo.get_by_id(survey_id)
        if not record or not can_view(record, viewer):
            raise NotFoundError("Survey", survey_id)
        return record

    async def complete(
        self,
        survey_id: str,
        data: SurveyComplete,
        viewer: Viewer,
    ) -> SurveyRecord:
        """
        Complete a pending survey with the client's name and turnaround days.

        Business rules:
        - Client name and both dates are required; nothing is written otherwise
        - Only store staff complete surveys, and only for their own store
        - A survey is completed once

        Raises:
            ValidationError: If a field is missing
            InsufficientPermissionsError: If the viewer is a manager
            NotFoundError: If the survey is not visible to the viewer
            ConflictError: If the survey was already completed
        """
        check_completion(data.client_name, data.reception_date, data.delivery_date)
        if viewer.is_manager:
            raise InsufficientPermissionsError("Managers have read-only access to surveys")

        record = await self.get_survey(survey_id, viewer)
        if record.status != SurveyStatus.PENDING:
            raise ConflictError(f"Survey is already {record.status}")

        days = calculate_days_process(data.reception_date, data.delivery_date)
        client_name = data.client_name.strip()
        success = await self._repo.complete(survey_id, client_name, days)
        if not success:
            raise ConflictError("Survey is no longer pending")

        logger.info(f"Survey {survey_id} completed by store {viewer.store_scope} ({days} days)")
        return await self.get_survey(survey_id, viewer)
