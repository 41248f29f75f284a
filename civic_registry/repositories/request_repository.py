from datetime import datetime


class ServiceRequestRepository:
    """
    Requests keyed by derived ID, plus the append-only list of every ID
    ever issued (duplicates included).
    """

    def __init__(self, col, log_col):
        self.col = col
        self.log_col = log_col

    async def get(self, request_id: int) -> dict | None:
        return await self.col.find_one({"_id": request_id})

    async def put(
        self,
        request_id: int,
        requester_identity: str,
        service_type: str,
        description: str,
        requested_at: datetime,
    ) -> dict:
        doc = {
            "_id": request_id,
            "requester_identity": requester_identity,
            "service_type": service_type,
            "description": description,
            "completed": False,
            "requested_at": requested_at,
        }
        # no collision check: an existing record at this ID is replaced
        await self.col.replace_one({"_id": request_id}, doc, upsert=True)
        return doc

    async def mark_completed(self, request_id: int) -> dict | None:
        await self.col.update_one(
            {"_id": request_id, "completed": False},
            {"$set": {"completed": True}},
        )
        return await self.get(request_id)

    async def append_id(self, request_id: int) -> None:
        seq = await self.log_col.count_documents({})
        await self.log_col.insert_one({"seq": seq + 1, "request_id": request_id})

    async def count_ids(self) -> int:
        return await self.log_col.count_documents({})

    async def list_ids(self) -> list[int]:
        cur = self.log_col.find({}).sort("seq", 1)
        return [d["request_id"] async for d in cur]
