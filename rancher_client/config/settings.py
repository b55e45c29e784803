import os
import tomllib
from pathlib import Path
from typing import Any

from pydantic import Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from rancher_client.core.exceptions import ConfigurationError
from rancher_client.core.logging import get_logger
from rancher_client.http.client import (
    DEFAULT_MAX_REDIRECTS,
    DEFAULT_TIMEOUT,
    RancherHttpClient,
    TransportFactory,
)
from rancher_client.http.transport import build_transport

from .logging import LoggingSettings
from .utils import find_toml_config_file, parse_duration


__all__ = ["ClientSettings", "ConfigurationError", "create_client"]

ENV_PREFIX = "RANCHER_"


class ClientSettings(BaseSettings):
    """
    Connection settings for the Rancher management API.

    Settings are loaded from environment variables (``RANCHER_`` prefix),
    .env files, and TOML configuration files. Precedence, highest first:
    explicit overrides, environment, TOML file, defaults.
    """

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    api_url: str = Field(
        description="Base URL of the Rancher management API",
    )

    ca_certs: str = Field(
        default="",
        description="PEM encoded CA certificates appended to the trust store",
    )

    ca_certs_file: Path | None = Field(
        default=None,
        description="Path to a PEM bundle, read and appended after ca_certs",
    )

    ignore_system_ca: bool = Field(
        default=False,
        description="Start from an empty trust store instead of the system one",
    )

    insecure: bool = Field(
        default=False,
        description="Disable TLS certificate verification (NOT RECOMMENDED)",
    )

    access_key: SecretStr | None = Field(
        default=None,
        description="API access key, combined with secret_key into a token",
    )

    secret_key: SecretStr | None = Field(
        default=None,
        description="API secret key, combined with access_key into a token",
    )

    token_key: SecretStr | None = Field(
        default=None,
        description="API bearer token; takes precedence over access/secret keys",
    )

    timeout: float = Field(
        default=DEFAULT_TIMEOUT,
        gt=0,
        description="Seconds allowed per call, redirects included (accepts '30s', '1m')",
    )

    max_redirects: int = Field(
        default=DEFAULT_MAX_REDIRECTS,
        ge=0,
        description="Maximum redirect hops followed per call",
    )

    bootstrap: bool = Field(
        default=False,
        description="Bootstrap mode: credentials are not required",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    @field_validator("timeout", mode="before")
    @classmethod
    def validate_timeout(cls, v: Any) -> Any:
        """Accept plain seconds or Go-style duration strings."""
        if isinstance(v, str | int | float):
            return parse_duration(v)
        return v

    @field_validator("api_url")
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"api_url must be an http(s) URL, got {v!r}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_key_pair(self) -> "ClientSettings":
        if bool(_secret(self.access_key)) != bool(_secret(self.secret_key)):
            raise ValueError("access_key and secret_key must be set together")
        return self

    def bearer_token(self) -> str:
        """Resolve the bearer credential sent to the API.

        ``token_key`` wins; otherwise ``access_key:secret_key``. Bootstrap mode
        allows running without any credential.

        Raises:
            ConfigurationError: No credential configured outside bootstrap mode
        """
        token = _secret(self.token_key)
        if token:
            return token
        access_key = _secret(self.access_key)
        if access_key:
            return f"{access_key}:{_secret(self.secret_key)}"
        if self.bootstrap:
            return ""
        raise ConfigurationError(
            "No credentials configured: set token_key, or access_key and "
            "secret_key, or enable bootstrap mode"
        )

    def ca_bundle(self) -> str:
        """Concatenate inline CA certificates with the CA file, if any."""
        parts = [self.ca_certs.strip()] if self.ca_certs.strip() else []
        if self.ca_certs_file is not None:
            try:
                parts.append(self.ca_certs_file.read_text(encoding="utf-8").strip())
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read CA file {self.ca_certs_file}: {e}"
                ) from e
        return "\n".join(parts) + "\n" if parts else ""

    def model_dump_safe(self) -> dict[str, Any]:
        """
        Dump model data with sensitive information masked.

        Returns:
            dict: Configuration with sensitive data masked
        """
        return self.model_dump(mode="json")

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file."""
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot read TOML config file {toml_path}: {e}"
            ) from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigurationError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        **kwargs: Any,
    ) -> "ClientSettings":
        """Create settings from a TOML file, the environment and overrides."""
        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path is not None:
            if not config_path.exists():
                raise ConfigurationError(f"Config file not found: {config_path}")
            config_data = cls.load_toml_config(config_path)
            get_logger(__name__).info(
                "config_file_loaded",
                path=str(config_path),
                category="config",
            )

        init_data = _without_env_overrides(config_data)
        for key, value in kwargs.items():
            if isinstance(value, dict) and isinstance(init_data.get(key), dict):
                init_data[key] = {**init_data[key], **value}
            else:
                init_data[key] = value

        try:
            return cls(**init_data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e


def _secret(value: SecretStr | None) -> str:
    return value.get_secret_value() if value is not None else ""


def _env_is_set(name: str) -> bool:
    upper = name.upper()
    return any(key.upper() == upper for key in os.environ)


def _without_env_overrides(config_data: dict[str, Any]) -> dict[str, Any]:
    """Drop TOML values shadowed by an environment variable.

    Init arguments outrank the environment in pydantic-settings, so TOML
    values must be removed where the environment should win.
    """
    filtered: dict[str, Any] = {}
    for key, value in config_data.items():
        env_key = f"{ENV_PREFIX}{key}"
        if isinstance(value, dict):
            nested = {
                nested_key: nested_value
                for nested_key, nested_value in value.items()
                if not _env_is_set(f"{env_key}__{nested_key}")
            }
            if nested and not _env_is_set(env_key):
                filtered[key] = nested
        elif not _env_is_set(env_key):
            filtered[key] = value
    return filtered


def create_client(
    settings: ClientSettings,
    transport_factory: TransportFactory | None = None,
) -> RancherHttpClient:
    """Build a :class:`RancherHttpClient` from resolved settings.

    Raises:
        ConfigurationError: Missing credentials or unreadable CA file
    """
    return RancherHttpClient(
        api_url=settings.api_url,
        ca_cert=settings.ca_bundle(),
        ignore_system_ca=settings.ignore_system_ca,
        insecure=settings.insecure,
        token=settings.bearer_token(),
        max_redirects=settings.max_redirects,
        timeout=settings.timeout,
        transport_factory=transport_factory or build_transport,
    )
