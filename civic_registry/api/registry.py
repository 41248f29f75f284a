from fastapi import APIRouter, Depends, Query

from civic_registry.api.deps import get_registry_service
from civic_registry.core.enums import EventType
from civic_registry.core.security import get_caller_identity
from civic_registry.schemas.admin import RegistryStateOut
from civic_registry.schemas.events import EventOut
from civic_registry.services.registry_service import RegistryService

router = APIRouter(tags=["Registry"])


@router.get("/registry", response_model=RegistryStateOut)
async def registry_state(service: RegistryService = Depends(get_registry_service)):
    return await service.get_state()


@router.get("/registry/me")
async def whoami(
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
):
    role = await service.role_of(caller)
    return {"identity": caller, "role": role.value}


@router.get("/events", response_model=list[EventOut])
async def list_events(
    type: EventType | None = Query(None),
    limit: int = Query(200, ge=1, le=1000),
    service: RegistryService = Depends(get_registry_service),
):
    return await service.notifications.list_events(
        event_type=type.value if type else None, limit=limit
    )
