"""
Chain Explorer Configuration

Pydantic Settings for the Chain Explorer service.
Loads from environment variables with sensible defaults.
"""

from typing import Literal
from pydantic_settings import BaseSettings
from pydantic import Field

from ..core.constants import DEFAULT_HASH_LENGTH, DEFAULT_WINDOW_SIZE, make_sentinel


class Settings(BaseSettings):
    """Chain Explorer service configuration."""

    # Service identity
    service_name: str = Field(default="chain-explorer", description="Service name for logging/metrics")
    environment: Literal["local", "staging", "production"] = Field(default="local")
    service_version: str = Field(default="0.1.0")
    log_level: str = Field(default="INFO")

    # Ledger node
    node_url: str = Field(default="http://127.0.0.1:8000", description="Base URL of the ledger node REST API")
    request_timeout_seconds: float = Field(default=30.0, description="Per-request timeout against the node")
    hash_length: int = Field(
        default=DEFAULT_HASH_LENGTH,
        gt=0,
        description="Hex characters in the node's hash encoding (sets the genesis sentinel length)",
    )

    # Explorer
    window_size: int = Field(default=DEFAULT_WINDOW_SIZE, gt=0, description="Blocks shown by default")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)

    class Config:
        env_prefix = ""
        case_sensitive = False
        env_file = ".env"
        extra = "ignore"

    @property
    def sentinel(self) -> str:
        """Genesis sentinel matching the node's hash length."""
        return make_sentinel(self.hash_length)


# Global settings instance
settings = Settings()
