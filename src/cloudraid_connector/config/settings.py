"""Application configuration settings."""

import os
import sys
import tempfile
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def default_config_home() -> Path:
    """Return the per-user directory holding the persisted session."""
    if sys.platform.startswith("win") and os.environ.get("APPDATA"):
        return Path(os.environ["APPDATA"]) / "cloudraid-client"
    return Path.home() / ".config" / "cloudraid-client"


def default_temp_dir() -> Path:
    """Return the directory downloaded files are staged in."""
    return Path(tempfile.gettempdir()) / "cloudraid-client"


class ServerSettings(BaseSettings):
    """CloudRAID server connection configuration."""

    host: str = Field(default="localhost")
    port: int = Field(default=8080)
    user: str = Field(default="")
    password: str = Field(default="")
    scheme: str = Field(default="http")

    model_config = SettingsConfigDict(env_prefix="CLOUDRAID_SERVER_")

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        """Validate the port range."""
        if v < 1 or v > 65535:
            raise ValueError("port must be between 1 and 65535")
        return v

    @field_validator("scheme")
    @classmethod
    def validate_scheme(cls, v):
        """Validate the URL scheme."""
        if v not in ("http", "https"):
            raise ValueError("scheme must be 'http' or 'https'")
        return v

    def to_connection(self):
        """Build the immutable connection credentials."""
        from ..core.models import ServerConnection

        return ServerConnection(
            host=self.host,
            user=self.user,
            password=self.password,
            port=self.port,
            scheme=self.scheme,
        )


class TransferSettings(BaseSettings):
    """File transfer configuration."""

    buffer_size: int = Field(default=4096, gt=0)
    temp_dir: Path = Field(default_factory=default_temp_dir)
    timeout_seconds: Optional[float] = Field(default=None)
    encoding: str = Field(default="utf-8")

    model_config = SettingsConfigDict(env_prefix="CLOUDRAID_TRANSFER_")


class SessionSettings(BaseSettings):
    """Session persistence configuration."""

    config_home: Path = Field(default_factory=default_config_home)

    model_config = SettingsConfigDict(env_prefix="CLOUDRAID_SESSION_")


class LoggingSettings(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO")
    format: str = Field(default="console")
    file_path: Optional[str] = Field(default=None)

    model_config = SettingsConfigDict(env_prefix="CLOUDRAID_LOG_")


class AppSettings(BaseSettings):
    """Main application settings."""

    name: str = Field(default="CloudRAID Connector")
    version: str = Field(default="0.1.0")

    # Sub-settings
    server: ServerSettings = Field(default_factory=ServerSettings)
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    session: SessionSettings = Field(default_factory=SessionSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = SettingsConfigDict(
        env_prefix="CLOUDRAID_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


# Global settings instance
settings = AppSettings()


def get_settings() -> AppSettings:
    """Get application settings."""
    return settings
