from typing import Annotated, List, Optional
from pydantic_settings import BaseSettings, NoDecode
from pydantic import ConfigDict, field_validator
from sqlalchemy.engine import URL
import json


class Settings(BaseSettings):
    # Database
    DATABASE_URL: str = "sqlite:///./pittmetro.db"
    DATABASE_HOST: Optional[str] = None
    DATABASE_PORT: int = 5432
    DATABASE_USER: str = "postgres"
    DATABASE_PASSWORD: str = ""
    DATABASE_NAME: str = "postgres"
    DATABASE_SSL: bool = True

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 10
    DB_POOL_TIMEOUT: int = 30
    DB_CONNECT_TIMEOUT: int = 10

    # Listing read path ceilings (seconds)
    LIST_CONNECT_TIMEOUT: float = 8.0
    LIST_CONNECT_ATTEMPTS: int = 3
    LIST_RETRY_BACKOFF: float = 1.0
    LIST_QUERY_TIMEOUT: float = 5.0
    LIST_REQUEST_TIMEOUT: float = 8.0

    # Uploads
    MAX_PHOTO_BYTES: int = 5 * 1024 * 1024

    # Reviews
    REVIEW_DEFAULT_STATUS: str = "approved"

    # Email
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 587
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    EMAIL_FROM: str = "noreply@pittmetrorealty.com"
    INQUIRY_RECIPIENT: str = "inquiries@pittmetrorealty.com"
    BRAND_NAME: str = "Pitt Metro Realty"

    # HTTP
    PORT: int = 3001
    ENVIRONMENT: str = "production"
    ALLOWED_ORIGINS: Annotated[List[str], NoDecode] = [
        "https://pittmetrorealty.com",
        "https://www.pittmetrorealty.com",
        "https://pittmetrorealty.netlify.app",
        "http://localhost:5173",
        "http://localhost:5174",
        "http://localhost:3001",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3001",
    ]
    CORS_STRICT: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    @field_validator("ALLOWED_ORIGINS", mode="before")
    @classmethod
    def parse_allowed_origins(cls, v):
        """Accept a JSON list or a comma separated string."""
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                try:
                    return json.loads(v)
                except json.JSONDecodeError:
                    raise ValueError(f"Invalid JSON in ALLOWED_ORIGINS: {v}")
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @property
    def database_url(self) -> str:
        """Explicit host settings win over DATABASE_URL."""
        if self.DATABASE_HOST:
            return URL.create(
                "postgresql+psycopg2",
                username=self.DATABASE_USER,
                password=self.DATABASE_PASSWORD,
                host=self.DATABASE_HOST,
                port=self.DATABASE_PORT,
                database=self.DATABASE_NAME,
            ).render_as_string(hide_password=False)
        return self.DATABASE_URL

    @property
    def smtp_configured(self) -> bool:
        return bool(self.SMTP_HOST and self.SMTP_USER and self.SMTP_PASS)

    model_config = ConfigDict(env_file=".env", extra="ignore")


settings = Settings()
