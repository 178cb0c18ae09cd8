"""Transport construction from target config and credentials.

Option precedence (later overrides earlier):
1. Target config options
2. Credential profile options

Both sources are filtered to the options the protocol accepts. The
enable_password credential is always passed through, since protocols do not
reliably declare it.
"""

import logging
import socket
import sys
from collections.abc import Callable
from collections.abc import Collection
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .credentials import load_credentials
from .exceptions import ResolutionFailure
from .exceptions import UnsupportedProtocolError
from .models import TargetConfig
from .paths import default_credentials_path
from .utils import filter_options

logger = logging.getLogger(__name__)

OptionsProvider = Callable[[str], Collection[str]]
TransportFactory = Callable[[str, dict[str, Any]], Any]

# Errors raised by factories when the target host name does not resolve
RESOLUTION_ERRORS: tuple[type[BaseException], ...] = (socket.gaierror, ResolutionFailure)

ENABLE_PASSWORD = "enable_password"


class TransportRegistry:
    """Registry of transport protocols.

    Provides both capabilities build_transport needs: the per-protocol
    option allow-list and the factory creating a connection.

    Example:
        ```python
        registry = TransportRegistry()
        registry.register("ssh", SshConnection, {"host", "port", "user", "password"})
        build_transport(config, options_for=registry.options_for, create=registry.create)
        ```
    """

    def __init__(self) -> None:
        self._protocols: dict[str, tuple[Callable[..., Any], frozenset[str]]] = {}

    def register(self, protocol: str, factory: Callable[..., Any], options: Collection[str]) -> None:
        """Register a protocol.

        Args:
            protocol: Protocol name
            factory: Callable invoked with the option map as keyword arguments
            options: Option keys the protocol accepts
        """
        self._protocols[protocol] = (factory, frozenset(options))
        logger.debug(f"Registered transport protocol '{protocol}'")

    def protocols(self) -> list[str]:
        """Get registered protocol names, sorted."""
        return sorted(self._protocols)

    def options_for(self, protocol: str) -> frozenset[str]:
        """Get the option keys accepted by a protocol.

        Raises:
            UnsupportedProtocolError: If the protocol is not registered
        """
        return self._get(protocol)[1]

    def create(self, protocol: str, options: dict[str, Any]) -> Any:
        """Create a connection for a protocol.

        Raises:
            UnsupportedProtocolError: If the protocol is not registered
        """
        factory, _ = self._get(protocol)
        return factory(**options)

    def _get(self, protocol: str) -> tuple[Callable[..., Any], frozenset[str]]:
        try:
            return self._protocols[protocol]
        except KeyError:
            raise UnsupportedProtocolError(protocol) from None


def build_transport_config(
    protocol: str,
    options: Mapping[str, Any],
    credentials: Mapping[str, Any] | None,
    allowed: Collection[str],
    transport_logger: logging.Logger,
) -> dict[str, Any]:
    """Build the option map handed to a transport factory.

    Args:
        protocol: Protocol name, used in debug output
        options: Target config option bag
        credentials: Credential entry for the target (optional)
        allowed: Option keys accepted by the protocol
        transport_logger: Logger attached to the map under "logger"

    Returns:
        New option map; credential values win over config values
    """
    transport_config = filter_options(options, allowed)
    logger.debug(f"Using {protocol} options from target config: {', '.join(transport_config)}")

    if credentials:
        valid_settings = filter_options(credentials, allowed)
        if ENABLE_PASSWORD in credentials:
            valid_settings[ENABLE_PASSWORD] = credentials[ENABLE_PASSWORD]
        transport_config.update(valid_settings)
        logger.debug(f"Using {protocol} options from credentials file: {', '.join(valid_settings)}")

    transport_config["logger"] = transport_logger
    return transport_config


def build_transport(
    config: TargetConfig,
    *,
    options_for: OptionsProvider,
    create: TransportFactory,
    transport_logger: logging.Logger | None = None,
    default_path: Path | None = None,
    fallback: Callable[[], Path | None] = default_credentials_path,
) -> Any:
    """Create a connection to the configured target.

    Args:
        config: Target configuration context
        options_for: Allow-list provider, protocol -> accepted option keys
        create: Transport factory, (protocol, options) -> connection
        transport_logger: Logger handed to the transport
            (default: target_transport.transport)
        default_path: Host-specific credentials path override
        fallback: Parent credentials path provider

    Returns:
        Whatever the factory returns

    Raises:
        InvalidConfigError: If an explicit credentials file is missing
        CredentialsFileError: If the credentials file cannot be parsed
        socket.gaierror, ResolutionFailure: If the target does not resolve;
            the message names the target
        SystemExit: If the protocol is not supported
    """
    transport_logger = transport_logger or logger
    protocol = config.protocol
    transport_config: dict[str, Any] = {}

    try:
        allowed = options_for(protocol)
        credentials = load_credentials(config, default_path=default_path, fallback=fallback)
        transport_config = build_transport_config(protocol, config.options, credentials, allowed, transport_logger)
        # retries are handled by the transport
        return create(protocol, transport_config)
    except RESOLUTION_ERRORS as e:
        target = transport_config.get("host") or config.host
        raise _with_target(e, target) from e
    except UnsupportedProtocolError:
        transport_logger.error(f"Invalid target mode protocol: {protocol}")
        sys.exit(1)


def _with_target(error: BaseException, target: str) -> BaseException:
    """Copy a resolution error with the target name prepended to its message."""
    if isinstance(error, OSError) and error.errno is not None:
        message = f"Error connecting to {target} - {error.strerror}"
        return type(error)(error.errno, message)

    message = f"Error connecting to {target} - {error}"
    try:
        return type(error)(message)
    except TypeError:
        return ResolutionFailure(message)
