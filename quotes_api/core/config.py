from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL
from typing import List

class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    APP_ENV: str = "local"
    APP_NAME: str = "quote-service"

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8080
    SHUTDOWN_TIMEOUT_SECONDS: int = 5

    CORS_ORIGINS: str = "http://localhost:3000"

    # Full SQLAlchemy URL; when empty it is assembled from the POSTGRES_* parts
    DATABASE_URL: str = ""
    DB_ECHO: bool = False
    DB_CREATE_TABLES: bool = True

    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "quotes"

    @property
    def cors_origins_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def database_url(self) -> str | URL:
        if self.DATABASE_URL.strip():
            return self.DATABASE_URL.strip()
        return URL.create(
            "postgresql+psycopg",
            username=self.POSTGRES_USER,
            password=self.POSTGRES_PASSWORD,
            host=self.POSTGRES_HOST,
            port=self.POSTGRES_PORT,
            database=self.POSTGRES_DB,
        )
