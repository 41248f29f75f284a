from datetime import datetime
from typing import Optional

from civic_registry.models.common import RegistryBaseModel


class Citizen(RegistryBaseModel):
    """
    A registered identity. Unknown identities read back as the zero
    record (id=0, registered=False).
    """

    id: int = 0
    owner_identity: str = ""
    name: str = ""
    registered: bool = False
    registered_at: Optional[datetime] = None

    @classmethod
    def from_doc(cls, doc: dict | None) -> "Citizen":
        if not doc:
            return cls()
        return cls(
            id=doc["citizen_id"],
            owner_identity=doc["_id"],
            name=doc["name"],
            registered=doc.get("registered", False),
            registered_at=doc.get("registered_at"),
        )
