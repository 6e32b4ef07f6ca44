"""
Application configuration with environment-driven settings.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "contact-intake"
    app_env: Literal["dev", "qa", "uat", "prod"] = "dev"
    debug: bool = False
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535, description="HTTP listening port")

    # Database
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = Field(
        default="",
        validation_alias=AliasChoices("db_password", "db_pass"),
    )
    db_name: str = "company_db"
    database_url: str | None = Field(
        default=None,
        description="Full SQLAlchemy URL; overrides the db_* fields when set",
    )
    db_pool_size: int = Field(default=10, ge=1, le=100)
    db_pool_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Seconds a caller waits for a pooled connection before failing",
    )
    db_create_database: bool = Field(
        default=True,
        description="Create the database at startup if it does not exist (MySQL only).",
    )

    # Inputs
    csv_import_path: Path = Path("data.csv")
    static_dir: Path = Path("public")

    @property
    def sqlalchemy_url(self) -> URL:
        """Build the async database URL."""
        if self.database_url:
            return make_url(self.database_url)
        return URL.create(
            "mysql+aiomysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
