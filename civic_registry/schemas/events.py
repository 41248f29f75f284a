from datetime import datetime
from typing import Any, Dict

from pydantic import BaseModel, Field


class EventOut(BaseModel):
    id: str
    time: datetime
    type: str
    actor: str
    payload: Dict[str, Any] = Field(default_factory=dict)
