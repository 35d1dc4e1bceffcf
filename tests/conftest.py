"""Pytest configuration and shared fixtures."""

import uuid
from datetime import datetime
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from surveydesk.core.security import create_access_token, hash_password
from surveydesk.dependencies.auth import get_token_blacklist
from surveydesk.domains.staff.models import StaffAccount, StaffRole
from surveydesk.domains.staff.repository import StaffRepositoryInterface
from surveydesk.domains.staff.router import get_staff_repository
from surveydesk.domains.survey.models import SurveyRecord, SurveyStatus
from surveydesk.domains.survey.repository import SurveyRepositoryInterface
from surveydesk.domains.survey.router import get_survey_repository
from surveydesk.main import create_app

STAFF_PASSWORD = "clave123"


class InMemorySurveyRepository(SurveyRepositoryInterface):
    """Survey repository backed by a dict, for tests."""

    def __init__(self):
        self.records: dict[str, SurveyRecord] = {}
        self.writes = 0

    async def create(self, record: SurveyRecord) -> SurveyRecord:
        record.id = uuid.uuid4().hex[:24]
        self.records[record.id] = record.model_copy(deep=True)
        self.writes += 1
        return record

    async def get_by_id(self, survey_id: str) -> SurveyRecord | None:
        record = self.records.get(survey_id)
        return record.model_copy(deep=True) if record else None

    async def list_newest_first(self, store: str | None = None) -> list[SurveyRecord]:
        records = [
            r.model_copy(deep=True)
            for r in self.records.values()
            if store is None or r.store == store
        ]
        return sorted(records, key=lambda r: r.timestamp, reverse=True)

    async def complete(self, survey_id: str, client_name: str, days_process: int) -> bool:
        record = self.records.get(survey_id)
        if not record or record.status != SurveyStatus.PENDING:
            return False
        record.client_name = client_name
        record.days_process = days_process
        record.status = SurveyStatus.COMPLETED.value
        self.writes += 1
        return True

    def add(self, **fields) -> SurveyRecord:
        """Insert a record directly, bypassing scoring."""
        fields.setdefault("tiempo", "Justo a tiempo")
        fields.setdefault("presentacion", 5)
        fields.setdefault("calidad", "Uniforme y renovado")
        fields.setdefault("confirmacion", True)
        record = SurveyRecord(id=uuid.uuid4().hex[:24], **fields)
        self.records[record.id] = record
        return record


class InMemoryStaffRepository(StaffRepositoryInterface):
    """Staff repository backed by a dict, for tests."""

    def __init__(self):
        self.accounts: dict[str, StaffAccount] = {}

    async def create(self, account: StaffAccount) -> StaffAccount:
        account.id = uuid.uuid4().hex[:24]
        self.accounts[account.id] = account.model_copy(deep=True)
        return account

    async def get_by_id(self, staff_id: str) -> StaffAccount | None:
        account = self.accounts.get(staff_id)
        return account.model_copy(deep=True) if account else None

    async def get_by_email(self, email: str) -> StaffAccount | None:
        for account in self.accounts.values():
            if account.email == email.lower():
                return account.model_copy(deep=True)
        return None

    async def update_fields(self, staff_id: str, fields: dict) -> bool:
        account = self.accounts.get(staff_id)
        if not account:
            return False
        self.accounts[staff_id] = account.model_copy(update=fields)
        return True


class InMemoryBlacklist:
    """Stand-in for the Redis token blacklist."""

    def __init__(self):
        self.keys: dict[str, int | None] = {}

    async def set(self, key: str, value: str, ttl: int | None = None) -> None:
        self.keys[key] = ttl

    async def exists(self, key: str) -> bool:
        return key in self.keys


@pytest.fixture
def survey_repo() -> InMemorySurveyRepository:
    return InMemorySurveyRepository()


@pytest.fixture
def staff_repo() -> InMemoryStaffRepository:
    repo = InMemoryStaffRepository()
    for email, role, store in [
        ("gerencia@barbour.co", StaffRole.MANAGER, None),
        ("andino@barbour.co", StaffRole.STORE, "andino"),
        ("fontanar@barbour.co", StaffRole.STORE, "fontanar"),
    ]:
        account_id = uuid.uuid4().hex[:24]
        repo.accounts[account_id] = StaffAccount(
            id=account_id,
            email=email,
            password_hash=hash_password(STAFF_PASSWORD),
            role=role,
            store=store,
        )
    return repo


@pytest.fixture
def blacklist() -> InMemoryBlacklist:
    return InMemoryBlacklist()


@pytest.fixture
def app(survey_repo, staff_repo, blacklist) -> FastAPI:
    """Application wired to in-memory repositories."""
    application = create_app()
    application.dependency_overrides[get_survey_repository] = lambda: survey_repo
    application.dependency_overrides[get_staff_repository] = lambda: staff_repo
    application.dependency_overrides[get_token_blacklist] = lambda: blacklist
    return application


@pytest_asyncio.fixture(scope="function")
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def auth_headers(staff_repo):
    """Build Authorization headers for a seeded staff email."""

    def _headers(email: str, auth_time: datetime | None = None) -> dict:
        account = next(a for a in staff_repo.accounts.values() if a.email == email)
        token = create_access_token(
            {
                "sub": account.id,
                "email": account.email,
                "role": account.role,
                "store": account.store,
            },
            auth_time=auth_time,
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
