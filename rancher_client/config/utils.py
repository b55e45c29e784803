"""Configuration file discovery and value parsing utilities."""

import os
import re
from pathlib import Path


CONFIG_FILE_ENV = "RANCHER_CONFIG_FILE"
LOCAL_CONFIG_NAME = ".rancher-client.toml"

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def get_config_dir() -> Path:
    """Get the rancher-client directory under XDG_CONFIG_HOME."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "rancher-client"


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file.

    Searches in the following order:
    1. The path named by RANCHER_CONFIG_FILE
    2. .rancher-client.toml in current directory
    3. config.toml in XDG_CONFIG_HOME/rancher-client/

    Returns:
        Path to the first found configuration file, or None if not found.
    """
    env_path = os.environ.get(CONFIG_FILE_ENV)
    if env_path:
        return Path(env_path)

    current_dir_config = Path.cwd() / LOCAL_CONFIG_NAME
    if current_dir_config.exists():
        return current_dir_config

    xdg_config = get_config_dir() / "config.toml"
    if xdg_config.exists():
        return xdg_config

    return None


def parse_duration(value: str | int | float) -> float:
    """Parse a duration into seconds.

    Accepts plain numbers (seconds) and Go-style duration strings such as
    ``"30s"``, ``"1m30s"``, ``"1.5h"`` or ``"250ms"``.

    Raises:
        ValueError: If the value is negative or not a valid duration.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid duration: {value!r}")
    if isinstance(value, int | float):
        seconds = float(value)
    else:
        text = value.strip()
        try:
            seconds = float(text)
        except ValueError:
            seconds = _parse_duration_string(text)

    if seconds < 0:
        raise ValueError(f"Duration must not be negative: {value!r}")
    return seconds


def _parse_duration_string(text: str) -> float:
    if not text:
        raise ValueError("Invalid duration: empty string")

    total = 0.0
    pos = 0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()

    if pos != len(text):
        raise ValueError(f"Invalid duration: {text!r}")
    return total
