from functools import lru_cache
from typing import Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Database (same .env keys as alembic/env.py)
    database_url: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    port: Optional[str] = None
    dbname: Optional[str] = None

    # JWT
    secret_key: str
    algorithm: str = "HS512"
    access_token_expire_minutes: int = 60
    refresh_token_expire_days: int = 7

    # bcrypt cost factor
    password_hash_rounds: int = 12

    log_level: str = "INFO"

    @model_validator(mode="after")
    def build_database_url(self):
        if self.database_url:
            return self

        if all([self.user, self.password, self.host, self.port, self.dbname]):
            self.database_url = (
                f"postgresql+psycopg2://{self.user}:{self.password}"
                f"@{self.host}:{self.port}/{self.dbname}?sslmode=require"
            )
        else:
            self.database_url = "sqlite:///./campus_connect.db"
        return self

    @property
    def access_token_ttl_seconds(self) -> int:
        return self.access_token_expire_minutes * 60

    @property
    def refresh_token_ttl_seconds(self) -> int:
        return self.refresh_token_expire_days * 24 * 60 * 60


@lru_cache
def get_settings() -> Settings:
    return Settings()
