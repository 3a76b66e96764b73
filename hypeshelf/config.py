"""Configuration settings for the HypeShelf backend"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings"""

    # API Settings
    API_V1_STR: str = "/api/v1"
    PROJECT_NAME: str = "HypeShelf"
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Database Settings
    POSTGRES_USER: str = "hypeshelf"
    POSTGRES_PASSWORD: str = "hypeshelf_pass"
    POSTGRES_HOST: str = "postgres"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "hypeshelf"
    SQLALCHEMY_DATABASE_URI: Optional[str] = None  # Overrides the POSTGRES_* parts when set

    @property
    def DATABASE_URL(self) -> str:
        if self.SQLALCHEMY_DATABASE_URI:
            return self.SQLALCHEMY_DATABASE_URI
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Identity provider tokens (verified locally, never fetched per request)
    AUTH_JWT_KEY: str = "change-me"  # Shared secret or PEM public key
    AUTH_JWT_ALGORITHMS: List[str] = ["HS256"]
    AUTH_JWT_ISSUER: Optional[str] = None
    AUTH_JWT_AUDIENCE: Optional[str] = None
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60  # Only used when minting local tokens

    # Identity provider webhooks
    IDENTITY_WEBHOOK_SECRET: Optional[str] = None  # "whsec_..." signing secret

    # Feed Settings
    FEED_PAGE_SIZE: int = 50

    # Rate Limit Settings
    RATE_LIMIT_STORAGE_URI: str = "memory://"
    RATE_LIMIT_DEFAULT: str = "100/minute"
    RATE_LIMIT_ADD_RECOMMENDATION: str = "20/minute"

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
