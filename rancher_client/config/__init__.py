"""Configuration module for the Rancher HTTP client."""

from .logging import LoggingSettings
from .settings import ClientSettings, ConfigurationError, create_client


__all__ = ["ClientSettings", "ConfigurationError", "LoggingSettings", "create_client"]
