from civic_registry.models.common import RegistryBaseModel


class RegistryState(RegistryBaseModel):
    administrator: str
    budget: int = 0
    total_citizens: int = 0

    @classmethod
    def from_doc(cls, doc: dict) -> "RegistryState":
        return cls(
            administrator=doc["administrator"],
            # stored as text so values beyond int64 survive
            budget=int(doc.get("budget", "0")),
            total_citizens=doc.get("total_citizens", 0),
        )
