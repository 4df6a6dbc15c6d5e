from pydantic_settings import BaseSettings
from typing import Optional, List


class Settings(BaseSettings):
    """Application settings with type-safe configuration management."""

    # Database Configuration
    DATABASE_URL: str = "postgresql+asyncpg://postgres:postgres@db:5432/devevent"
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_CONNECT_TIMEOUT: int = 10  # seconds, applies to connection establishment only
    DB_CREATE_TABLES: bool = True

    # Redis Configuration
    REDIS_URL: str = "redis://redis:6379/0"
    CACHE_ENABLED: bool = True
    CACHE_TTL_SECONDS: int = 60

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    BOOKING_RATE_LIMIT: str = "10/minute"

    # Image storage (S3-compatible)
    S3_ENDPOINT: str = "https://s3.amazonaws.com"
    S3_ACCESS_KEY: Optional[str] = None
    S3_SECRET_KEY: Optional[str] = None
    S3_BUCKET: str = "devevent-images"
    S3_REGION: str = "us-east-1"
    S3_PUBLIC_URL: Optional[str] = None
    S3_FOLDER: str = "events"

    # CORS Configuration
    ALLOWED_ORIGINS: str = "http://localhost:3000,http://localhost:8000"

    # Environment
    ENVIRONMENT: str = "development"

    # Logging
    LOG_LEVEL: Optional[str] = None  # defaults to DEBUG in development, INFO elsewhere
    LOG_FILE: Optional[str] = None   # e.g. logs/devevent.log; enables a rotating file sink
    LOG_JSON: bool = False

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def allowed_origins_list(self) -> List[str]:
        """Convert comma-separated ALLOWED_ORIGINS string to list."""
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",")]

    @property
    def image_base_url(self) -> str:
        """Public prefix for uploaded images; falls back to path-style bucket URL."""
        if self.S3_PUBLIC_URL:
            return self.S3_PUBLIC_URL.rstrip("/")
        return f"{self.S3_ENDPOINT.rstrip('/')}/{self.S3_BUCKET}"


# Create a single instance to be imported throughout the app
settings = Settings()
