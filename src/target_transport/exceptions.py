"""Exceptions for target-transport."""


class TransportConfigError(Exception):
    """Base exception for target transport configuration errors."""

    pass


class InvalidConfigError(TransportConfigError):
    """Configuration points at something that cannot be used.

    Raised before any connection is attempted, e.g. when an explicit
    credentials file is configured but does not exist.
    """

    pass


class CredentialsFileError(TransportConfigError):
    """Error reading or parsing a credentials file."""

    pass


class ResolutionFailure(TransportConfigError):
    """Target host name could not be resolved while connecting."""

    pass


class UnsupportedProtocolError(TransportConfigError):
    """Requested transport protocol is unknown or cannot be loaded."""

    def __init__(self, protocol: str, message: str | None = None):
        self.protocol = protocol
        super().__init__(message or f"Unsupported transport protocol: {protocol}")
