from pydantic import BaseModel


class RequestServiceBody(BaseModel):
    service_type: str
    description: str


class RequestIdsOut(BaseModel):
    total: int
    request_ids: list[int]


class TotalRequestsOut(BaseModel):
    total: int
