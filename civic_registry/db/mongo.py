from functools import lru_cache

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from civic_registry.core.config import get_settings

STATE_COLLECTION = "registry_state"
CITIZENS_COLLECTION = "citizens"
REQUESTS_COLLECTION = "service_requests"
REQUEST_LOG_COLLECTION = "request_log"
OFFICIALS_COLLECTION = "officials"
EVENTS_COLLECTION = "events"
COUNTERS_COLLECTION = "counters"


@lru_cache
def get_client() -> AsyncIOMotorClient:
    settings = get_settings()
    return AsyncIOMotorClient(settings.mongo_uri)


def get_db() -> AsyncIOMotorDatabase:
    return get_client()[get_settings().mongo_db]
