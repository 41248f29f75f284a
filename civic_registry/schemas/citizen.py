from pydantic import BaseModel


class RegisterCitizenBody(BaseModel):
    name: str


class CitizenRosterOut(BaseModel):
    total: int
    citizens: list[str]
