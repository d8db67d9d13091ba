# foodflow/core/config.py
from functools import lru_cache
from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    project_name: str = "FoodFlow API"
    log_level: str = "INFO"

    # "mongo" for a real deployment, "memory" for local runs and tests
    storage: Literal["mongo", "memory"] = "mongo"
    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "foodflow"

    jwt_secret: str = "dev"
    jwt_alg: str = "HS256"
    access_ttl_min: int = 120

    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    return Settings()
