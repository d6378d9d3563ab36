"""
Shared configuration management for the Guestbook service.
"""

from typing import Any, Dict

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from shared.errors import ConfigError


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Environment
    env: str = Field(default="local", validation_alias="GUESTBOOK_ENV")
    log_level: str = Field(default="info", validation_alias="GUESTBOOK_LOG_LEVEL")

    # Relational store (names match the container environment)
    postgres_user: str = Field(default="postgres", validation_alias="POSTGRES_USER")
    postgres_password: str = Field(default="", validation_alias="POSTGRES_PASSWORD")
    postgres_db: str = Field(default="postgres", validation_alias="POSTGRES_DB")
    postgres_host: str = Field(default="localhost", validation_alias="DISCOURSE_DB_HOST")
    postgres_port: int = Field(default=5432, validation_alias="DISCOURSE_DB_PORT")

    # Cache tier, write-capable and read-only endpoints
    redis_master_url: str = Field(
        default="redis://redis-master:6379/0", validation_alias="GUESTBOOK_REDIS_MASTER_URL"
    )
    redis_slave_url: str = Field(
        default="redis://redis-slave:6379/0", validation_alias="GUESTBOOK_REDIS_SLAVE_URL"
    )

    # Frontend
    static_dir: str = Field(default="public", validation_alias="GUESTBOOK_STATIC_DIR")

    def postgres_connect_kwargs(self) -> Dict[str, Any]:
        """Connection arguments for asyncpg. TLS is disabled."""
        return {
            "user": self.postgres_user,
            "password": self.postgres_password,
            "database": self.postgres_db,
            "host": self.postgres_host,
            "port": self.postgres_port,
            "ssl": False,
        }


class ServiceConfig(BaseConfig):
    """Service-specific configuration."""

    service_name: str
    port: int
    host: str = Field(default="0.0.0.0", validation_alias="GUESTBOOK_HOST")

    def __init__(self, service_name: str, port: int, **kwargs):
        super().__init__(service_name=service_name, port=port, **kwargs)


def get_config(service_name: str, port: int, **overrides) -> ServiceConfig:
    """Get configuration for a specific service."""
    try:
        return ServiceConfig(service_name=service_name, port=port, **overrides)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid configuration for {service_name}",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e
