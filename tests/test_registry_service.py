import asyncio
import logging

import pytest

from civic_registry.core.enums import CallerRole, EventType
from civic_registry.core.errors import (
    AlreadyCompleted,
    AlreadyRegistered,
    InvalidInput,
    NotAuthorized,
    NotFound,
    NotRegistered,
)
from civic_registry.api.deps import build_registry_service
from tests.conftest import ADMIN, ALICE, BOB, OFFICIAL

pytestmark = pytest.mark.anyio


# -------------------------
# Bootstrap
# -------------------------
async def test_fresh_registry_state(service):
    state = await service.get_state()
    assert state == {
        "administrator": ADMIN,
        "budget": 0,
        "total_citizens": 0,
        "total_requests": 0,
    }


async def test_administrator_is_fixed_at_creation(db, service, clock, caplog):
    await service.get_state()
    redeployed = build_registry_service(
        db, administrator="0xmallory", request_id_modulus=10000, clock=clock
    )
    with caplog.at_level(logging.WARNING):
        assert await redeployed.get_administrator() == ADMIN
    assert "0xmallory" in caplog.text

    with pytest.raises(NotAuthorized):
        await redeployed.update_budget("0xmallory", 1)


def test_null_administrator_rejected(db):
    with pytest.raises(ValueError):
        build_registry_service(db, administrator="0x0000", request_id_modulus=10000)


# -------------------------
# Citizens
# -------------------------
async def test_register_citizen(service, events):
    citizen = await service.register_citizen(ALICE, "Alice")

    assert citizen.id == 1
    assert citizen.owner_identity == ALICE
    assert citizen.name == "Alice"
    assert citizen.registered is True
    assert citizen.registered_at is not None

    assert await service.get_total_citizens() == 1
    assert await service.get_all_citizens() == [ALICE]

    assert len(events) == 1
    assert events[0].type == EventType.citizen_registered
    assert events[0].payload == {"identity": ALICE, "id": 1, "name": "Alice"}


async def test_second_registration_rejected_and_record_unchanged(service, events):
    await service.register_citizen(ALICE, "Alice")

    with pytest.raises(AlreadyRegistered):
        await service.register_citizen(ALICE, "Alice Again")

    citizen = await service.get_citizen_info(ALICE)
    assert citizen.id == 1
    assert citizen.name == "Alice"
    assert await service.get_total_citizens() == 1
    assert len(events) == 1


@pytest.mark.parametrize("name", ["", "   "])
async def test_empty_name_rejected(service, events, name):
    with pytest.raises(InvalidInput):
        await service.register_citizen(ALICE, name)

    assert (await service.get_citizen_info(ALICE)).registered is False
    assert await service.get_all_citizens() == []
    assert events == []


async def test_citizen_ids_follow_registration_order(service):
    identities = [f"0xcitizen{i}" for i in range(5)]
    for i, identity in enumerate(identities):
        citizen = await service.register_citizen(identity, f"Citizen {i}")
        assert citizen.id == i + 1

    assert await service.get_all_citizens() == identities
    assert await service.get_total_citizens() == 5


async def test_failed_registration_leaves_no_id_gap(service):
    await service.register_citizen(ALICE, "Alice")
    with pytest.raises(InvalidInput):
        await service.register_citizen(BOB, "")
    assert (await service.register_citizen(BOB, "Bob")).id == 2


async def test_unknown_citizen_reads_as_zero_record(service):
    citizen = await service.get_citizen_info("0xnobody")
    assert citizen.id == 0
    assert citizen.registered is False
    assert citizen.name == ""
    assert citizen.registered_at is None


# -------------------------
# Service requests
# -------------------------
async def test_request_service(service, events):
    await service.register_citizen(ALICE, "Alice")
    request = await service.request_service(ALICE, "water", "leak at 5th ave")

    assert request.id != 0
    assert request.requester_identity == ALICE
    assert request.completed is False

    stored = await service.get_service_request(request.id)
    assert stored.service_type == "water"
    assert stored.description == "leak at 5th ave"
    assert await service.get_total_requests() == 1
    assert await service.list_request_ids() == [request.id]

    assert events[-1].type == EventType.service_requested
    assert events[-1].payload == {
        "request_id": request.id,
        "identity": ALICE,
        "service_type": "water",
    }


async def test_unregistered_caller_cannot_request(service, events):
    with pytest.raises(NotRegistered):
        await service.request_service(BOB, "water", "leak")

    assert await service.get_total_requests() == 0
    assert events == []


@pytest.mark.parametrize(
    "service_type,description",
    [("", "leak"), ("water", ""), (" ", "leak")],
)
async def test_empty_request_fields_rejected(service, service_type, description):
    await service.register_citizen(ALICE, "Alice")
    with pytest.raises(InvalidInput):
        await service.request_service(ALICE, service_type, description)
    assert await service.get_total_requests() == 0


async def test_unknown_request_reads_as_zero_record(service):
    request = await service.get_service_request(42)
    assert request.id == 0
    assert request.exists is False


async def test_colliding_request_overwrites_earlier_record(service, caplog):
    await service.register_citizen(ALICE, "Alice")
    first = await service.request_service(ALICE, "water", "leak at 5th ave")
    await service.complete_service(ADMIN, first.id)

    # same caller within the same second derives the same ID
    with caplog.at_level(logging.WARNING):
        second = await service.request_service(ALICE, "roads", "pothole")

    assert second.id == first.id
    assert "collision" in caplog.text

    stored = await service.get_service_request(first.id)
    assert stored.service_type == "roads"
    assert stored.completed is False
    assert await service.get_total_requests() == 2
    assert await service.list_request_ids() == [first.id, first.id]


async def test_requests_in_different_seconds_usually_differ(service, clock):
    await service.register_citizen(ALICE, "Alice")
    ids = set()
    for _ in range(5):
        ids.add((await service.request_service(ALICE, "water", "leak")).id)
        clock.advance()
    assert len(ids) > 1


# -------------------------
# Completion
# -------------------------
async def test_administrator_completes_request(service, events):
    await service.register_citizen(ALICE, "Alice")
    request = await service.request_service(ALICE, "water", "leak at 5th ave")

    done = await service.complete_service(ADMIN, request.id)

    assert done.completed is True
    assert (await service.get_service_request(request.id)).completed is True
    assert events[-1].type == EventType.service_completed
    assert events[-1].payload == {"request_id": request.id, "official": ADMIN}


async def test_authorized_official_completes_request(service, events):
    await service.register_citizen(ALICE, "Alice")
    request = await service.request_service(ALICE, "water", "leak")
    await service.add_authorized_official(ADMIN, OFFICIAL)

    await service.complete_service(OFFICIAL, request.id)

    assert events[-1].actor == OFFICIAL
    assert events[-1].payload["official"] == OFFICIAL


async def test_citizen_cannot_complete(service):
    await service.register_citizen(ALICE, "Alice")
    request = await service.request_service(ALICE, "water", "leak")

    with pytest.raises(NotAuthorized):
        await service.complete_service(ALICE, request.id)
    assert (await service.get_service_request(request.id)).completed is False


async def test_complete_unknown_request(service):
    with pytest.raises(NotFound):
        await service.complete_service(ADMIN, 1234)


async def test_complete_twice_fires_once(service, events):
    await service.register_citizen(ALICE, "Alice")
    request = await service.request_service(ALICE, "water", "leak")
    await service.complete_service(ADMIN, request.id)

    with pytest.raises(AlreadyCompleted):
        await service.complete_service(ADMIN, request.id)

    completed = [e for e in events if e.type == EventType.service_completed]
    assert len(completed) == 1


async def test_unauthorized_check_precedes_lookup(service):
    with pytest.raises(NotAuthorized):
        await service.complete_service(BOB, 1234)


# -------------------------
# Administration
# -------------------------
async def test_add_official_is_idempotent(service, events):
    assert await service.add_authorized_official(ADMIN, OFFICIAL) is True
    assert await service.add_authorized_official(ADMIN, OFFICIAL) is True

    assert await service.is_authorized_official(OFFICIAL) is True
    assert await service.list_officials() == [OFFICIAL]
    assert events == []


async def test_only_administrator_adds_officials(service):
    await service.add_authorized_official(ADMIN, OFFICIAL)

    with pytest.raises(NotAuthorized):
        await service.add_authorized_official(OFFICIAL, BOB)
    assert await service.is_authorized_official(BOB) is False


@pytest.mark.parametrize("identity", ["", "  ", "0x0000000000000000000000000000000000000000", "0"])
async def test_null_official_rejected(service, identity):
    with pytest.raises(InvalidInput):
        await service.add_authorized_official(ADMIN, identity)
    assert await service.list_officials() == []


async def test_update_budget(service, events):
    assert await service.update_budget(ADMIN, 500) == 500
    assert await service.get_budget() == 500

    assert await service.update_budget(ADMIN, -20) == -20
    assert await service.get_budget() == -20

    assert events[-1].type == EventType.budget_updated
    assert events[-1].payload == {"new_budget": "-20", "updater": ADMIN}


async def test_budget_is_unbounded(service):
    huge = 2**200
    await service.update_budget(ADMIN, huge)
    assert await service.get_budget() == huge


async def test_only_administrator_sets_budget(service, events):
    await service.add_authorized_official(ADMIN, OFFICIAL)

    for caller in (OFFICIAL, BOB):
        with pytest.raises(NotAuthorized):
            await service.update_budget(caller, 10)

    assert await service.get_budget() == 0
    assert events == []


async def test_roles(service):
    await service.register_citizen(ALICE, "Alice")
    await service.add_authorized_official(ADMIN, OFFICIAL)

    assert await service.role_of(ADMIN) == CallerRole.administrator
    assert await service.role_of(OFFICIAL) == CallerRole.official
    assert await service.role_of(ALICE) == CallerRole.citizen
    assert await service.role_of(BOB) == CallerRole.anonymous


# -------------------------
# Notifications
# -------------------------
async def test_events_are_persisted(service):
    await service.register_citizen(ALICE, "Alice")
    await service.update_budget(ADMIN, 7)

    logged = await service.notifications.list_events()
    assert {e["type"] for e in logged} == {"citizen.registered", "budget.updated"}

    only_budget = await service.notifications.list_events(event_type="budget.updated")
    assert len(only_budget) == 1
    assert only_budget[0]["actor"] == ADMIN


async def test_failing_listener_does_not_undo_operation(service, caplog):
    async def broken(event):
        raise RuntimeError("observer down")

    service.notifications.subscribe(broken)

    with caplog.at_level(logging.ERROR):
        citizen = await service.register_citizen(ALICE, "Alice")

    assert citizen.id == 1
    assert (await service.get_citizen_info(ALICE)).registered is True
    assert "observer down" in caplog.text


async def test_listener_may_call_back_into_registry(service):
    async def fund_new_citizens(event):
        if event.type == EventType.citizen_registered:
            await service.update_budget(ADMIN, 100 * event.payload["id"])

    service.notifications.subscribe(fund_new_citizens)

    citizen = await asyncio.wait_for(service.register_citizen(ALICE, "Alice"), timeout=2)

    assert citizen.id == 1
    assert await service.get_budget() == 100


async def test_event_store_failure_does_not_fail_operation(service, events, monkeypatch, caplog):
    async def store_down(data):
        raise RuntimeError("event store down")

    monkeypatch.setattr(service.notifications.repo, "create", store_down)

    with caplog.at_level(logging.ERROR):
        citizen = await service.register_citizen(ALICE, "Alice")

    assert citizen.id == 1
    assert (await service.get_citizen_info(ALICE)).registered is True
    assert await service.get_total_citizens() == 1
    assert [e.type for e in events] == [EventType.citizen_registered]
    assert "event store down" in caplog.text


async def test_events_with_equal_timestamps_keep_publish_order(service):
    # fixed clock: every event carries the same time
    for budget in (1, 2, 3):
        await service.update_budget(ADMIN, budget)

    logged = await service.notifications.list_events(event_type="budget.updated")
    assert [e["payload"]["new_budget"] for e in logged] == ["3", "2", "1"]
    assert all("seq" not in e for e in logged)


async def test_officials_with_equal_timestamps_keep_insertion_order(service):
    officials = ["0xzed", "0xamy", "0xmid"]
    for identity in officials:
        await service.add_authorized_official(ADMIN, identity)

    assert await service.list_officials() == officials


# -------------------------
# Concurrency
# -------------------------
async def test_concurrent_registrations_get_sequential_ids(service):
    identities = [f"0xconcurrent{i}" for i in range(20)]

    citizens = await asyncio.gather(
        *(service.register_citizen(identity, identity) for identity in identities)
    )

    assert sorted(c.id for c in citizens) == list(range(1, 21))
    assert len({c.owner_identity for c in citizens}) == 20
    assert await service.get_total_citizens() == 20
    assert sorted(await service.get_all_citizens()) == sorted(identities)


async def test_concurrent_duplicate_registration_succeeds_once(service):
    results = await asyncio.gather(
        *(service.register_citizen(ALICE, "Alice") for _ in range(10)),
        return_exceptions=True,
    )

    successes = [r for r in results if not isinstance(r, Exception)]
    failures = [r for r in results if isinstance(r, Exception)]
    assert len(successes) == 1
    assert successes[0].id == 1
    assert len(failures) == 9
    assert all(isinstance(f, AlreadyRegistered) for f in failures)
    assert await service.get_total_citizens() == 1
