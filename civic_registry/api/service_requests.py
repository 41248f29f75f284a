# civic_registry/api/service_requests.py
from fastapi import APIRouter, Depends, status

from civic_registry.api.deps import get_registry_service
from civic_registry.core.security import get_caller_identity
from civic_registry.models.service_requests import ServiceRequest
from civic_registry.schemas.service_request import (
    RequestIdsOut,
    RequestServiceBody,
    TotalRequestsOut,
)
from civic_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/service-requests", tags=["Service Requests"])


@router.post("", response_model=ServiceRequest, status_code=status.HTTP_201_CREATED)
async def request_service(
    body: RequestServiceBody,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
):
    return await service.request_service(caller, body.service_type, body.description)


@router.get("", response_model=RequestIdsOut)
async def list_request_ids(service: RegistryService = Depends(get_registry_service)):
    ids = await service.list_request_ids()
    return RequestIdsOut(total=len(ids), request_ids=ids)


@router.get("/total", response_model=TotalRequestsOut)
async def total_requests(service: RegistryService = Depends(get_registry_service)):
    return TotalRequestsOut(total=await service.get_total_requests())


@router.get("/{request_id}", response_model=ServiceRequest)
async def get_service_request(
    request_id: int,
    service: RegistryService = Depends(get_registry_service),
):
    return await service.get_service_request(request_id)


@router.post("/{request_id}/complete", response_model=ServiceRequest)
async def complete_service(
    request_id: int,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
):
    return await service.complete_service(caller, request_id)
