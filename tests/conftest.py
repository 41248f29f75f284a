from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from mongomock_motor import AsyncMongoMockClient

from civic_registry.api.deps import build_registry_service

ADMIN = "0xadmin"
ALICE = "0xalice"
BOB = "0xbob"
OFFICIAL = "0xofficial"


class SteppableClock:
    """Fixed clock; advance() moves it so derived request IDs change."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int = 1) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db():
    return AsyncMongoMockClient()["civic_registry_test"]


@pytest.fixture
def clock():
    return SteppableClock()


@pytest.fixture
def service(db, clock):
    return build_registry_service(
        db, administrator=ADMIN, request_id_modulus=10000, clock=clock
    )


@pytest.fixture
def events(service):
    received = []

    async def listener(event):
        received.append(event)

    service.notifications.subscribe(listener)
    return received
