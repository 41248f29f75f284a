from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List

from civic_registry.core.enums import CallerRole, EventType
from civic_registry.core.errors import (
    AlreadyCompleted,
    AlreadyRegistered,
    InvalidInput,
    NotAuthorized,
    NotFound,
    NotRegistered,
    RegistryError,
)
from civic_registry.core.security import is_null_identity, normalize_identity
from civic_registry.models.citizens import Citizen
from civic_registry.models.events import RegistryEvent
from civic_registry.models.registry_state import RegistryState
from civic_registry.models.service_requests import ServiceRequest
from civic_registry.repositories.citizen_repository import CitizenRepository
from civic_registry.repositories.official_repository import OfficialRepository
from civic_registry.repositories.request_repository import ServiceRequestRepository
from civic_registry.repositories.state_repository import RegistryStateRepository
from civic_registry.services.notifications import NotificationService
from civic_registry.services.request_ids import DEFAULT_MODULUS, derive_request_id

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _require_text(value: str | None, field: str) -> str:
    text = (value or "").strip()
    if not text:
        raise InvalidInput(f"{field} must not be empty")
    return text


class RegistryService:
    """
    Citizen registry and service-request ledger.

    Every mutating operation runs under one lock and checks all of its
    preconditions before writing, so a rejected call changes nothing.
    """

    def __init__(
        self,
        state_repo: RegistryStateRepository,
        citizen_repo: CitizenRepository,
        request_repo: ServiceRequestRepository,
        official_repo: OfficialRepository,
        notifications: NotificationService,
        administrator: str,
        request_id_modulus: int = DEFAULT_MODULUS,
        clock: Clock = utc_now,
    ):
        self.state_repo = state_repo
        self.citizen_repo = citizen_repo
        self.request_repo = request_repo
        self.official_repo = official_repo
        self.notifications = notifications
        self.administrator = normalize_identity(administrator)
        self.request_id_modulus = request_id_modulus
        self.clock = clock
        self._lock = asyncio.Lock()

        if is_null_identity(self.administrator):
            raise ValueError("administrator identity must not be null")

    # -------------------------
    # Helpers
    # -------------------------
    async def _state(self) -> RegistryState:
        doc = await self.state_repo.ensure(self.administrator)
        state = RegistryState.from_doc(doc)
        if state.administrator != self.administrator:
            logger.warning(
                "configured administrator %s ignored; registry administrator is %s",
                self.administrator,
                state.administrator,
            )
            self.administrator = state.administrator
        return state

    async def role_of(self, identity: str) -> CallerRole:
        identity = normalize_identity(identity)
        state = await self._state()
        if identity == state.administrator:
            return CallerRole.administrator
        if await self.official_repo.is_authorized(identity):
            return CallerRole.official
        if await self.citizen_repo.exists(identity):
            return CallerRole.citizen
        return CallerRole.anonymous

    async def _require_administrator(self, caller: str) -> None:
        state = await self._state()
        if caller != state.administrator:
            raise NotAuthorized("administrator only")

    async def _require_official(self, caller: str) -> None:
        state = await self._state()
        if caller == state.administrator:
            return
        if not await self.official_repo.is_authorized(caller):
            raise NotAuthorized("administrator or authorized official only")

    def _event(self, event_type: EventType, actor: str, payload: dict) -> RegistryEvent:
        return RegistryEvent(type=event_type, actor=actor, time=self.clock(), payload=payload)

    # -------------------------
    # Citizens
    # -------------------------
    async def register_citizen(self, caller: str, name: str) -> Citizen:
        caller = normalize_identity(caller)
        async with self._lock:
            try:
                if await self.citizen_repo.exists(caller):
                    raise AlreadyRegistered(f"{caller} is already registered")
                name = _require_text(name, "name")
            except RegistryError as exc:
                logger.info("register_citizen rejected for %s: %s", caller, exc.code)
                raise

            await self._state()
            citizen_id = await self.state_repo.next_citizen_id()
            doc = await self.citizen_repo.create(caller, citizen_id, name, self.clock())
            citizen = Citizen.from_doc(doc)

            logger.info("citizen %s registered as #%d", caller, citizen_id)
            event = self._event(
                EventType.citizen_registered,
                caller,
                {"identity": caller, "id": citizen_id, "name": name},
            )

        # dispatched outside the lock so listeners may call back into the registry
        await self.notifications.publish(event)
        return citizen

    async def get_citizen_info(self, identity: str) -> Citizen:
        return Citizen.from_doc(await self.citizen_repo.get(normalize_identity(identity)))

    async def get_all_citizens(self) -> List[str]:
        return await self.citizen_repo.roster()

    async def get_total_citizens(self) -> int:
        return (await self._state()).total_citizens

    # -------------------------
    # Service requests
    # -------------------------
    async def request_service(
        self, caller: str, service_type: str, description: str
    ) -> ServiceRequest:
        caller = normalize_identity(caller)
        async with self._lock:
            try:
                if not await self.citizen_repo.exists(caller):
                    raise NotRegistered(f"{caller} is not a registered citizen")
                service_type = _require_text(service_type, "service_type")
                description = _require_text(description, "description")
            except RegistryError as exc:
                logger.info("request_service rejected for %s: %s", caller, exc.code)
                raise

            now = self.clock()
            request_id = derive_request_id(caller, now, self.request_id_modulus)

            previous = await self.request_repo.get(request_id)
            if previous:
                # known limitation: derived IDs collide and the older record is lost
                logger.warning(
                    "request id %d collision: overwriting request of %s (completed=%s)",
                    request_id,
                    previous["requester_identity"],
                    previous.get("completed", False),
                )

            doc = await self.request_repo.put(
                request_id, caller, service_type, description, now
            )
            await self.request_repo.append_id(request_id)

            logger.info("service request %d submitted by %s", request_id, caller)
            event = self._event(
                EventType.service_requested,
                caller,
                {
                    "request_id": request_id,
                    "identity": caller,
                    "service_type": service_type,
                },
            )
            result = ServiceRequest.from_doc(doc)

        await self.notifications.publish(event)
        return result

    async def complete_service(self, caller: str, request_id: int) -> ServiceRequest:
        caller = normalize_identity(caller)
        async with self._lock:
            try:
                await self._require_official(caller)
                request = ServiceRequest.from_doc(await self.request_repo.get(request_id))
                if not request.exists:
                    raise NotFound(f"service request {request_id} not found")
                if request.completed:
                    raise AlreadyCompleted(f"service request {request_id} already completed")
            except RegistryError as exc:
                logger.info("complete_service rejected for %s: %s", caller, exc.code)
                raise

            doc = await self.request_repo.mark_completed(request_id)

            logger.info("service request %d completed by %s", request_id, caller)
            event = self._event(
                EventType.service_completed,
                caller,
                {"request_id": request_id, "official": caller},
            )
            result = ServiceRequest.from_doc(doc)

        await self.notifications.publish(event)
        return result

    async def get_service_request(self, request_id: int) -> ServiceRequest:
        return ServiceRequest.from_doc(await self.request_repo.get(request_id))

    async def get_total_requests(self) -> int:
        return await self.request_repo.count_ids()

    async def list_request_ids(self) -> List[int]:
        return await self.request_repo.list_ids()

    # -------------------------
    # Administration
    # -------------------------
    async def add_authorized_official(self, caller: str, identity: str) -> bool:
        caller = normalize_identity(caller)
        async with self._lock:
            try:
                await self._require_administrator(caller)
                if is_null_identity(identity):
                    raise InvalidInput("official identity must not be null")
            except RegistryError as exc:
                logger.info("add_authorized_official rejected for %s: %s", caller, exc.code)
                raise

            identity = normalize_identity(identity)
            added = await self.official_repo.add(identity, caller, self.clock())
            if added:
                logger.info("official %s authorized by %s", identity, caller)
            return True

    async def is_authorized_official(self, identity: str) -> bool:
        return await self.official_repo.is_authorized(normalize_identity(identity))

    async def list_officials(self) -> List[str]:
        return await self.official_repo.list()

    async def update_budget(self, caller: str, new_budget: int) -> int:
        caller = normalize_identity(caller)
        async with self._lock:
            try:
                await self._require_administrator(caller)
            except RegistryError as exc:
                logger.info("update_budget rejected for %s: %s", caller, exc.code)
                raise

            await self.state_repo.set_budget(new_budget)

            logger.info("budget set to %d by %s", new_budget, caller)
            event = self._event(
                EventType.budget_updated,
                caller,
                {"new_budget": str(new_budget), "updater": caller},
            )

        await self.notifications.publish(event)
        return new_budget

    async def get_budget(self) -> int:
        return (await self._state()).budget

    async def get_administrator(self) -> str:
        return (await self._state()).administrator

    async def get_state(self) -> dict:
        state = await self._state()
        return {
            "administrator": state.administrator,
            "budget": state.budget,
            "total_citizens": state.total_citizens,
            "total_requests": await self.request_repo.count_ids(),
        }
