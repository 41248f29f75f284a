from __future__ import annotations

from functools import lru_cache
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_name: str = "Civic Registry"
    env: str = "dev"
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "civic_registry"

    # identity that deploys the registry; written once into the state document
    administrator_identity: str = "0xadmin"
    request_id_modulus: int = Field(10000, gt=0)

    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ]
    )
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
