from datetime import datetime


class OfficialRepository:
    def __init__(self, col):
        self.col = col

    async def add(self, identity: str, added_by: str, added_at: datetime) -> bool:
        """
        Returns True when the identity was newly authorized.
        Callers serialize writes, so the count-based seq is stable.
        """
        if await self.col.count_documents({"_id": identity}):
            return False
        seq = await self.col.count_documents({})
        await self.col.insert_one(
            {
                "_id": identity,
                "authorized": True,
                "added_by": added_by,
                "added_at": added_at,
                "seq": seq + 1,
            }
        )
        return True

    async def is_authorized(self, identity: str) -> bool:
        return await self.col.count_documents({"_id": identity, "authorized": True}) > 0

    async def list(self) -> list[str]:
        cur = self.col.find({"authorized": True}).sort([("added_at", 1), ("seq", 1)])
        return [d["_id"] async for d in cur]
