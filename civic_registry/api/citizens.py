from __future__ import annotations

from fastapi import APIRouter, Depends, status

from civic_registry.api.deps import get_registry_service
from civic_registry.core.security import get_caller_identity
from civic_registry.models.citizens import Citizen
from civic_registry.schemas.citizen import CitizenRosterOut, RegisterCitizenBody
from civic_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/citizens", tags=["citizens"])


@router.post("", response_model=Citizen, status_code=status.HTTP_201_CREATED)
async def register_citizen(
    payload: RegisterCitizenBody,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
) -> Citizen:
    return await service.register_citizen(caller, payload.name)


@router.get("", response_model=CitizenRosterOut)
async def list_citizens(
    service: RegistryService = Depends(get_registry_service),
) -> CitizenRosterOut:
    citizens = await service.get_all_citizens()
    return CitizenRosterOut(total=len(citizens), citizens=citizens)


@router.get("/{identity}", response_model=Citizen)
async def get_citizen(
    identity: str,
    service: RegistryService = Depends(get_registry_service),
) -> Citizen:
    # unknown identities come back as the zero record, not 404
    return await service.get_citizen_info(identity)
