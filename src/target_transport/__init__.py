"""target-transport: Connection options for remote targets.

This library assembles the options used to open a connection to a remote
target from two sources:
- Target config (protocol, host, option bag), typically from YAML settings
- Credentials file (TOML), one table per target host

Both sources are filtered against the options the transport protocol
accepts, credentials win on conflicts, and the result is handed to a
transport factory supplied by the application.

Public API:
    build_transport: Resolve credentials, merge options, create the connection
    build_transport_config: Merge already-loaded options into a transport map
    load_credentials: Load the credential profile for a target
    is_split_fqdn: Detect unquoted dotted host names in credentials files
    resolve_credentials_path: Choose the credentials file for a target
    TargetConfig: Dataclass describing one target
    TargetSettings, SettingsPaths: Layered YAML settings
    TransportRegistry: Protocol allow-lists and factories
    TransportConfigError, InvalidConfigError, CredentialsFileError,
    ResolutionFailure, UnsupportedProtocolError: Exception types

Example:
    ```python
    from pathlib import Path
    from target_transport import SettingsPaths, TargetSettings, TransportRegistry, build_transport

    settings = TargetSettings(SettingsPaths(user=Path.home() / ".target-transport" / "settings.yaml"))
    config = settings.get_target_config(host="host.example.org")

    registry = TransportRegistry()
    registry.register("ssh", SshConnection, {"host", "port", "user", "key_files"})

    connection = build_transport(config, options_for=registry.options_for, create=registry.create)
    ```
"""

from .credentials import is_split_fqdn
from .credentials import load_credentials
from .credentials import lookup_profile
from .credentials import parse_credentials_file
from .exceptions import CredentialsFileError
from .exceptions import InvalidConfigError
from .exceptions import ResolutionFailure
from .exceptions import TransportConfigError
from .exceptions import UnsupportedProtocolError
from .models import Notice
from .models import TargetConfig
from .paths import default_credentials_path
from .paths import platform_specific_path
from .paths import resolve_credentials_path
from .settings import SettingsPaths
from .settings import TargetSettings
from .transport import TransportRegistry
from .transport import build_transport
from .transport import build_transport_config
from .utils import deep_merge

__version__ = "0.1.0"

__all__ = [
    "build_transport",
    "build_transport_config",
    "load_credentials",
    "lookup_profile",
    "parse_credentials_file",
    "is_split_fqdn",
    "resolve_credentials_path",
    "default_credentials_path",
    "platform_specific_path",
    "TargetConfig",
    "Notice",
    "TargetSettings",
    "SettingsPaths",
    "TransportRegistry",
    "deep_merge",
    "TransportConfigError",
    "InvalidConfigError",
    "CredentialsFileError",
    "ResolutionFailure",
    "UnsupportedProtocolError",
]
