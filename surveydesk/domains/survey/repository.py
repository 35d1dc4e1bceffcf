"""Survey repository for MongoDB."""

import logging
from abc import ABC, abstractmethod

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import DESCENDING
from pymongo.errors import PyMongoError

from surveydesk.core.exceptions import DatabaseError
from surveydesk.db.mongodb import SURVEYS_COLLECTION
from surveydesk.domains.survey.models import SurveyRecord, SurveyStatus

logger = logging.getLogger(__name__)


class SurveyRepositoryInterface(ABC):
    """Abstract repository interface for survey records."""

    @abstractmethod
    async def create(self, record: SurveyRecord) -> SurveyRecord:
        """Insert a new survey record."""
        pass

    @abstractmethod
    async def get_by_id(self, survey_id: str) -> SurveyRecord | None:
        """Get survey record by ID."""
        pass

    @abstractmethod
    async def list_newest_first(self, store: str | None = None) -> list[SurveyRecord]:
        """List survey records ordered by timestamp, newest first."""
        pass

    @abstractmethod
    async def complete(self, survey_id: str, client_name: str, days_process: int) -> bool:
        """Mark a pending survey as completed. Returns False if it was not pending."""
        pass


def _to_object_id(survey_id: str) -> ObjectId | None:
    try:
        return ObjectId(survey_id)
    except (InvalidId, TypeError):
        return None


def _to_record(doc: dict) -> SurveyRecord:
    doc["_id"] = str(doc["_id"])
    return SurveyRecord(**doc)


class MongoSurveyRepository(SurveyRepositoryInterface):
    """MongoDB implementation of survey repository."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[SURVEYS_COLLECTION]

    async def create(self, record: SurveyRecord) -> SurveyRecord:
        """Insert a new survey record."""
        doc = record.model_dump(by_alias=True, exclude={"id"})
        try:
            result = await self._collection.insert_one(doc)
        except PyMongoError as e:
            logger.error(f"Survey insert failed: {e}")
            raise DatabaseError("Could not save the survey")
        record.id = str(result.inserted_id)
        return record

    async def get_by_id(self, survey_id: str) -> SurveyRecord | None:
        """Get survey record by ID."""
        object_id = _to_object_id(survey_id)
        if object_id is None:
            return None
        try:
            doc = await self._collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Survey lookup failed: {e}")
            raise DatabaseError("Could not load the survey")
        if not doc:
            return None
        return _to_record(doc)

    async def list_newest_first(self, store: str | None = None) -> list[SurveyRecord]:
        """List survey records ordered by timestamp, newest first."""
        query: dict = {}
        if store:
            query["store"] = store

        try:
            cursor = self._collection.find(query).sort("timestamp", DESCENDING)
            docs = await cursor.to_list(length=None)
        except PyMongoError as e:
            logger.error(f"Survey query failed: {e}")
            raise DatabaseError("Could not load surveys")

        return [_to_record(doc) for doc in docs]

    async def complete(self, survey_id: str, client_name: str, days_process: int) -> bool:
        """Mark a pending survey as completed in a single conditional write."""
        object_id = _to_object_id(survey_id)
        if object_id is None:
            return False
        try:
            result = await self._collection.update_one(
                {
                    "_id": object_id,
                    "status": SurveyStatus.PENDING.value,
                },
                {
                    "$set": {
                        "clientName": client_name,
                        "daysProcess": days_process,
                        "status": SurveyStatus.COMPLETED.value,
                    }
                },
            )
        except PyMongoError as e:
            logger.error(f"Survey completion failed: {e}")
            raise DatabaseError("Could not complete the survey")
        return result.modified_count > 0
