"""Configuration package for the CloudRAID connector."""

from .settings import (
    ServerSettings,
    TransferSettings,
    SessionSettings,
    LoggingSettings,
    AppSettings,
    get_settings,
    default_config_home,
    default_temp_dir
)

__all__ = [
    "ServerSettings",
    "TransferSettings",
    "SessionSettings",
    "LoggingSettings",
    "AppSettings",
    "get_settings",
    "default_config_home",
    "default_temp_dir"
]
