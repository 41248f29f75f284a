from datetime import datetime, timezone
from typing import Any, Dict
from uuid import uuid4

from pydantic import Field

from civic_registry.core.enums import EventType
from civic_registry.models.common import RegistryBaseModel


class RegistryEvent(RegistryBaseModel):
    id: str = Field(default_factory=lambda: f"evt_{uuid4().hex[:8]}")
    time: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    type: EventType          # citizen.registered, service.completed, ...
    actor: str               # identity that triggered the change

    payload: Dict[str, Any] = Field(default_factory=dict)
