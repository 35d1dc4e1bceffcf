"""Staff account repository - data access layer for MongoDB."""

import logging
from abc import ABC, abstractmethod

from bson import ObjectId
from bson.errors import InvalidId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError, PyMongoError

from surveydesk.core.exceptions import DatabaseError, DuplicateError
from surveydesk.db.mongodb import STAFF_COLLECTION
from surveydesk.domains.staff.models import StaffAccount

logger = logging.getLogger(__name__)


class StaffRepositoryInterface(ABC):
    """Staff repository interface (Port)."""

    @abstractmethod
    async def create(self, account: StaffAccount) -> StaffAccount:
        """Create a new staff account."""
        pass

    @abstractmethod
    async def get_by_id(self, staff_id: str) -> StaffAccount | None:
        """Get staff account by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> StaffAccount | None:
        """Get staff account by email."""
        pass

    @abstractmethod
    async def update_fields(self, staff_id: str, fields: dict) -> bool:
        """Set the given fields on a staff account."""
        pass


def _to_account(doc: dict) -> StaffAccount:
    doc["_id"] = str(doc["_id"])
    return StaffAccount(**doc)


class MongoStaffRepository(StaffRepositoryInterface):
    """MongoDB implementation of staff repository (Adapter)."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self._db = db
        self._collection = db[STAFF_COLLECTION]

    async def create(self, account: StaffAccount) -> StaffAccount:
        """Create a new staff account."""
        doc = account.model_dump(exclude={"id"}, by_alias=True)
        try:
            result = await self._collection.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateError("email", account.email)
        except PyMongoError as e:
            logger.error(f"Staff insert failed: {e}")
            raise DatabaseError("Could not create the staff account")
        account.id = str(result.inserted_id)
        return account

    async def get_by_id(self, staff_id: str) -> StaffAccount | None:
        """Get staff account by ID."""
        try:
            object_id = ObjectId(staff_id)
        except (InvalidId, TypeError):
            return None
        try:
            doc = await self._collection.find_one({"_id": object_id})
        except PyMongoError as e:
            logger.error(f"Staff lookup by id failed: {e}")
            raise DatabaseError("Could not load the staff account")
        if not doc:
            return None
        return _to_account(doc)

    async def get_by_email(self, email: str) -> StaffAccount | None:
        """Get staff account by email."""
        try:
            doc = await self._collection.find_one({"email": email.lower()})
        except PyMongoError as e:
            logger.error(f"Staff lookup by email failed: {e}")
            raise DatabaseError("Could not load the staff account")
        if not doc:
            return None
        return _to_account(doc)

    async def update_fields(self, staff_id: str, fields: dict) -> bool:
        """Set the given fields on a staff account."""
        try:
            object_id = ObjectId(staff_id)
        except (InvalidId, TypeError):
            return False
        try:
            result = await self._collection.update_one({"_id": object_id}, {"$set": fields})
        except PyMongoError as e:
            logger.error(f"Staff update failed: {e}")
            raise DatabaseError("Could not update the staff account")
        return result.matched_count > 0
