"""Database module - MongoDB, Redis connections."""

from surveydesk.db.mongodb import get_mongodb
from surveydesk.db.redis import get_redis

__all__ = [
    "get_mongodb",
    "get_redis",
]
