"""Credentials file location for remote targets.

Resolution order (first match wins):
1. Explicit credentials file from the target config (must exist)
2. Host-specific system file, /etc/target-transport/<host>/credentials
3. Fallback credentials path (~/.target-transport/credentials by default)
"""

import logging
import os
from collections.abc import Callable
from pathlib import Path

from .exceptions import InvalidConfigError
from .models import Notice
from .models import PathResolution
from .models import TargetConfig

APP_NAME = "target-transport"

SYSTEM_CONFIG_DIR = f"/etc/{APP_NAME}"


def default_credentials_path() -> Path:
    """Get the user-level credentials path shared by all targets."""
    return Path.home() / f".{APP_NAME}" / "credentials"


def platform_specific_path(path: str, windows: bool | None = None) -> str:
    """Translate a POSIX system path for the current platform.

    On Windows, paths under /etc/target-transport are moved to the system
    drive, e.g. C:\\target-transport\\<host>\\credentials. Other paths and
    other platforms are returned unchanged.

    Args:
        path: POSIX style path
        windows: Force Windows behaviour (default: detect from os.name)

    Returns:
        Path string for the platform
    """
    if windows is None:
        windows = os.name == "nt"
    if not windows or not path.startswith(SYSTEM_CONFIG_DIR + "/"):
        return path

    drive = os.environ.get("SYSTEMDRIVE", "C:")
    rest = path[len(SYSTEM_CONFIG_DIR) + 1 :].replace("/", "\\")
    return f"{drive}\\{APP_NAME}\\{rest}"


def host_credentials_path(host: str) -> Path:
    """Get the system-wide credentials path for a single host."""
    return Path(platform_specific_path(f"{SYSTEM_CONFIG_DIR}/{host}/credentials"))


def resolve_credentials_path(
    config: TargetConfig,
    *,
    default_path: Path | None = None,
    fallback: Callable[[], Path | None] = default_credentials_path,
) -> PathResolution:
    """Choose the credentials file for a target.

    Args:
        config: Target configuration context
        default_path: Host-specific path to check instead of the system path
        fallback: Provider of the parent credentials path, used when neither
            the explicit nor the host-specific file applies and it exists

    Returns:
        PathResolution with the chosen path (or None) and a debug notice

    Raises:
        InvalidConfigError: If config.credentials_file is set but missing
    """
    if config.credentials_file:
        explicit = Path(config.credentials_file)
        if not explicit.exists():
            raise InvalidConfigError(f"Credentials file specified for target mode does not exist: '{explicit}'")
        path: Path | None = explicit
    else:
        host_path = default_path if default_path is not None else host_credentials_path(config.host)
        if host_path.exists():
            path = host_path
        else:
            candidate = fallback()
            path = candidate if candidate is not None and candidate.exists() else None

    if path:
        message = f"Loading credentials file '{path}' for target '{config.host}'"
    else:
        message = f"No credentials file found for target '{config.host}'"

    return PathResolution(path=path, notices=[Notice(logging.DEBUG, message)])
