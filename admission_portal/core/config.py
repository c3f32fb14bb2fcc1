from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: Optional[str] = Field(None, alias="DATABASE_URL")

    jwt_secret_key: Optional[str] = Field(None, alias="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")

    # Hard ceiling of operations per atomic batch in the store.
    store_batch_limit: int = Field(500, alias="STORE_BATCH_LIMIT", gt=0)

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    cors_origins: str = Field("*", alias="CORS_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
