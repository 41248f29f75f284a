from datetime import datetime
from typing import Optional

from civic_registry.models.common import RegistryBaseModel


class ServiceRequest(RegistryBaseModel):
    # id == 0 means "not found"
    id: int = 0
    requester_identity: str = ""
    service_type: str = ""
    description: str = ""
    completed: bool = False
    requested_at: Optional[datetime] = None

    @property
    def exists(self) -> bool:
        return self.id != 0

    @classmethod
    def from_doc(cls, doc: dict | None) -> "ServiceRequest":
        if not doc:
            return cls()
        return cls(
            id=doc["_id"],
            requester_identity=doc["requester_identity"],
            service_type=doc["service_type"],
            description=doc["description"],
            completed=doc.get("completed", False),
            requested_at=doc.get("requested_at"),
        )
