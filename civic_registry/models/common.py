# civic_registry/models/common.py
from pydantic import BaseModel, ConfigDict


class RegistryBaseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)
