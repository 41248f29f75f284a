from pydantic import BaseModel


class AddOfficialBody(BaseModel):
    identity: str


class OfficialOut(BaseModel):
    identity: str
    authorized: bool


class BudgetBody(BaseModel):
    budget: int


class BudgetOut(BaseModel):
    budget: int


class RegistryStateOut(BaseModel):
    administrator: str
    budget: int
    total_citizens: int
    total_requests: int
