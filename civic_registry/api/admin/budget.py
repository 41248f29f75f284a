from fastapi import APIRouter, Depends

from civic_registry.api.deps import get_registry_service
from civic_registry.core.security import get_caller_identity
from civic_registry.schemas.admin import BudgetBody, BudgetOut
from civic_registry.services.registry_service import RegistryService

router = APIRouter(prefix="/admin/budget", tags=["Admin - Budget"])


@router.get("", response_model=BudgetOut)
async def get_budget(service: RegistryService = Depends(get_registry_service)):
    return BudgetOut(budget=await service.get_budget())


@router.put("", response_model=BudgetOut)
async def update_budget(
    body: BudgetBody,
    caller: str = Depends(get_caller_identity),
    service: RegistryService = Depends(get_registry_service),
):
    return BudgetOut(budget=await service.update_budget(caller, body.budget))
