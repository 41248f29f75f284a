from fastapi import APIRouter, Depends

from civic_registry.api.deps import get_registry_service
from civic_registry.core.security import get_caller_identity
from civic_registry.schemas.admin import AddOfficialBody, OfficialOut
from civic_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/admin/officials", tags=["Admin - Officials"])


@router.post("", response_model=OfficialOut)
async def add_official(
    body: AddOfficialBody,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
):
    authorized = await service.add_authorized_official(caller, body.identity)
    return OfficialOut(identity=body.identity.strip(), authorized=authorized)


@router.get("", response_model=list[str])
async def list_officials(service: RegistryService = Depends(get_registry_service)):
    return await service.list_officials()


@router.get("/{identity}", response_model=OfficialOut)
async def get_official(
    identity: str,
    service: RegistryService = Depends(get_registry_service),
):
    return OfficialOut(
        identity=identity,
        authorized=await service.is_authorized_official(identity),
    )
