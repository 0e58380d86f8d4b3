# homefix/config.py
from functools import lru_cache
from pydantic_settings import BaseSettings
from typing import List

class Settings(BaseSettings):
    app_name: str = "HomeFix API"

    # Backend
    backend_url: str
    service_role_key: str

    # Auth
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60

    # CORS
    allowed_origins: List[str] = ["*"]

    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        extra = "ignore"

MAX_PHOTOS = 5
PART_OTHER = "other"

@lru_cache
def get_settings() -> Settings:
    return Settings()
