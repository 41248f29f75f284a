from pymongo import ReturnDocument

from civic_registry.utils.mongo import serialize_mongo, strip_id

EVENT_SEQ_ID = "events"


class EventRepository:
    def __init__(self, collection, counters):
        self.collection = collection
        self.counters = counters

    async def _next_seq(self) -> int:
        doc = await self.counters.find_one_and_update(
            {"_id": EVENT_SEQ_ID},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return int(doc["seq"])

    async def list(self, event_type: str | None = None, limit: int = 200):
        filt = {"type": event_type} if event_type else {}
        out = []
        cur = self.collection.find(filt).sort([("time", -1), ("seq", -1)]).limit(limit)
        async for doc in cur:
            doc = strip_id(doc)
            doc.pop("seq", None)
            out.append(doc)

        return [serialize_mongo(r) for r in out]

    async def create(self, data: dict):
        data["seq"] = await self._next_seq()
        await self.collection.insert_one(data)
