"""Target settings from layered YAML files.

Settings live under a target_mode section:

    target_mode:
      protocol: ssh
      host: host.example.org
      credentials_file: ~/.target-transport/credentials
      port: 2222

Merge order (later overrides earlier):
1. User settings (lowest priority)
2. Project settings
3. Local settings (highest priority)
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .exceptions import InvalidConfigError
from .models import TargetConfig
from .utils import deep_merge

logger = logging.getLogger(__name__)

TARGET_MODE_SECTION = "target_mode"

DEFAULT_PROTOCOL = "ssh"


@dataclass(frozen=True)
class SettingsPaths:
    """Paths to the settings files for each scope.

    Attributes:
        user: Path to user-global settings file (required)
        project: Path to project settings file (optional)
        local: Path to local (machine-specific) settings file (optional)
    """

    user: Path
    project: Path | None = None
    local: Path | None = None


class TargetSettings:
    """Reads target configuration from user/project/local settings.

    Args:
        paths: Settings file paths for all scopes
    """

    def __init__(self, paths: SettingsPaths):
        self.paths = paths

    def get_merged_settings(self) -> dict[str, Any]:
        """Get merged settings from all scopes.

        Returns:
            Merged settings dictionary
        """
        merged: dict[str, Any] = {}

        for path in (self.paths.user, self.paths.project, self.paths.local):
            data = self._read_yaml(path)
            if data:
                merged = deep_merge(merged, data)

        return merged

    def get_target_config(self, host: str | None = None, protocol: str | None = None) -> TargetConfig:
        """Build the target config context from merged settings.

        Every key of the target_mode section other than protocol and
        credentials_file ends up in the option bag, host included.

        Args:
            host: Target host, overrides settings
            protocol: Transport protocol, overrides settings

        Returns:
            TargetConfig for the target

        Raises:
            InvalidConfigError: If no host is configured or the section is malformed
        """
        section = self.get_merged_settings().get(TARGET_MODE_SECTION) or {}
        if not isinstance(section, dict):
            raise InvalidConfigError(f"'{TARGET_MODE_SECTION}' settings must be a mapping")

        options = dict(section)
        configured_protocol = options.pop("protocol", None)
        protocol = protocol or configured_protocol or DEFAULT_PROTOCOL
        credentials_file = options.pop("credentials_file", None)

        if host:
            options["host"] = host
        host = options.get("host")
        if not host:
            raise InvalidConfigError("No target host configured")

        return TargetConfig(
            protocol=str(protocol),
            host=str(host),
            credentials_file=Path(credentials_file).expanduser() if credentials_file else None,
            options=options,
        )

    def _read_yaml(self, path: Path | None) -> dict[str, Any] | None:
        """Read YAML file.

        Args:
            path: Path to YAML file

        Returns:
            Dictionary from YAML or None if file doesn't exist or is unreadable
        """
        if path is None or not path.exists():
            return None

        try:
            with open(path) as f:
                data = yaml.safe_load(f)
                return data if data else {}
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Failed to read settings from {path}: {e}")
            return None
