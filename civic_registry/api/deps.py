from functools import lru_cache

from civic_registry.core.config import get_settings
from civic_registry.db.mongo import (
    CITIZENS_COLLECTION,
    COUNTERS_COLLECTION,
    EVENTS_COLLECTION,
    OFFICIALS_COLLECTION,
    REQUEST_LOG_COLLECTION,
    REQUESTS_COLLECTION,
    STATE_COLLECTION,
    get_db,
)
from civic_registry.repositories.citizen_repository import CitizenRepository
from civic_registry.repositories.event_repository import EventRepository
from civic_registry.repositories.official_repository import OfficialRepository
from civic_registry.repositories.request_repository import ServiceRequestRepository
from civic_registry.repositories.state_repository import RegistryStateRepository
from civic_registry.services.notifications import NotificationService
from civic_registry.services.registry_service import RegistryService


def build_registry_service(db, administrator: str, request_id_modulus: int, **kwargs) -> RegistryService:
    return RegistryService(
        state_repo=RegistryStateRepository(db[STATE_COLLECTION]),
        citizen_repo=CitizenRepository(db[CITIZENS_COLLECTION]),
        request_repo=ServiceRequestRepository(
            db[REQUESTS_COLLECTION], db[REQUEST_LOG_COLLECTION]
        ),
        official_repo=OfficialRepository(db[OFFICIALS_COLLECTION]),
        notifications=NotificationService(
            EventRepository(db[EVENTS_COLLECTION], db[COUNTERS_COLLECTION])
        ),
        administrator=administrator,
        request_id_modulus=request_id_modulus,
        **kwargs,
    )


@lru_cache
def get_registry_service() -> RegistryService:
    """
    FastAPI dependency: one service (and one lock) per process
    """
    settings = get_settings()
    return build_registry_service(
        get_db(),
        administrator=settings.administrator_identity,
        request_id_modulus=settings.request_id_modulus,
    )
