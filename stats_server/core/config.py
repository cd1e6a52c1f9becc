"""Application configuration using Pydantic Settings"""

import logging
from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Settings loaded from environment variables and ./config.env"""

    model_config = SettingsConfigDict(
        env_file="config.env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Database
    db_host: str = Field(default="localhost", validation_alias=AliasChoices("SLB_DB_HOST", "db_host"))
    db_port: int = Field(default=5432, validation_alias=AliasChoices("SLB_DB_PORT", "db_port"))
    db_user: str = Field(default="slb", validation_alias=AliasChoices("POSTGRES_USER", "db_user"))
    db_password: str = Field(
        default="slb", validation_alias=AliasChoices("POSTGRES_PASSWORD", "db_password")
    )
    db_name: str = Field(
        default="spacexlaunchbot", validation_alias=AliasChoices("POSTGRES_DB", "db_name")
    )
    db_ssl: str = Field(
        default="prefer",
        validation_alias=AliasChoices("SLB_DB_SSL", "db_ssl"),
        description="asyncpg ssl mode (disable / prefer / require)",
    )
    db_connect_timeout: float = Field(
        default=60.0,
        gt=0,
        validation_alias=AliasChoices("SLB_DB_CONNECT_TIMEOUT", "db_connect_timeout"),
    )

    # Stats cache
    cache_ttl: float = Field(
        default=5.0,
        gt=0,
        validation_alias=AliasChoices("STATS_CACHE_TTL", "cache_ttl"),
        description="Seconds a generated response is served before a request may regenerate it",
    )
    refresh_timeout: float = Field(
        default=5.0,
        gt=0,
        validation_alias=AliasChoices("STATS_REFRESH_TIMEOUT", "refresh_timeout"),
        description="Upper bound in seconds for one stats generation",
    )
    coalesce_refreshes: bool = Field(
        default=True,
        validation_alias=AliasChoices("STATS_COALESCE_REFRESHES", "coalesce_refreshes"),
        description="Let concurrent cache misses share a single in-flight refresh",
    )

    # Environment
    environment: str = Field(default="production", description="Environment name")
    log_level: str = Field(default="INFO", description="Logging level")

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8080, description="Server port")
    cors_origins: list[str] = Field(default=["*"], description="Allowed CORS origins")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in valid_levels:
            logger.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper

    @property
    def connection_string(self) -> str:
        return (
            f"postgres://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def censored_connection_string(self) -> str:
        """Connection string with the password masked, safe for logs"""
        return (
            f"postgres://{self.db_user}:******"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def is_development(self) -> bool:
        """Check if running in development environment"""
        return self.environment.lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
