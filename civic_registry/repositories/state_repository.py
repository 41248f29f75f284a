from pymongo import ReturnDocument

STATE_ID = "registry"


class RegistryStateRepository:
    def __init__(self, col):
        self.col = col

    async def ensure(self, administrator: str) -> dict:
        # $setOnInsert: the administrator is fixed by whoever creates the document
        return await self.col.find_one_and_update(
            {"_id": STATE_ID},
            {
                "$setOnInsert": {
                    "administrator": administrator,
                    "budget": "0",
                    "total_citizens": 0,
                }
            },
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )

    async def get(self) -> dict | None:
        return await self.col.find_one({"_id": STATE_ID})

    async def set_budget(self, budget: int) -> None:
        await self.col.update_one(
            {"_id": STATE_ID},
            {"$set": {"budget": str(budget)}},
        )

    async def next_citizen_id(self) -> int:
        doc = await self.col.find_one_and_update(
            {"_id": STATE_ID},
            {"$inc": {"total_citizens": 1}},
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["total_citizens"])
