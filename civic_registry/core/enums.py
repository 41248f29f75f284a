from enum import Enum


class CallerRole(str, Enum):
    administrator = "administrator"
    official = "official"
    citizen = "citizen"
    anonymous = "anonymous"


class EventType(str, Enum):
    citizen_registered = "citizen.registered"
    service_requested = "service.requested"
    service_completed = "service.completed"
    budget_updated = "budget.updated"
