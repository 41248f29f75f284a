class CitizenRepository:
    def __init__(self, col):
        self.col = col

    async def get(self, identity: str) -> dict | None:
        return await self.col.find_one({"_id": identity})

    async def exists(self, identity: str) -> bool:
        return await self.col.count_documents({"_id": identity, "registered": True}) > 0

    async def create(self, identity: str, citizen_id: int, name: str, registered_at) -> dict:
        doc = {
            "_id": identity,
            "citizen_id": citizen_id,
            "name": name,
            "registered": True,
            "registered_at": registered_at,
        }
        await self.col.insert_one(doc)
        return doc

    async def roster(self) -> list[str]:
        cur = self.col.find({"registered": True}).sort("citizen_id", 1)
        return [d["_id"] async for d in cur]
