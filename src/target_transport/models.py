"""Data models for target-transport."""

from dataclasses import dataclass
from dataclasses import field
from pathlib import Path
from typing import Any


@dataclass(frozen=True)
class TargetConfig:
    """Configuration context for one remote target.

    Passed explicitly to every resolution function; nothing in the library
    reads process-wide configuration.

    Attributes:
        protocol: Transport protocol name (e.g. "ssh", "winrm")
        host: Target host name, also used as the credentials profile name
        credentials_file: Explicit credentials file (optional)
        options: Arbitrary option bag, filtered against the protocol allow-list
    """

    protocol: str
    host: str
    credentials_file: Path | None = None
    options: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Notice:
    """A log line produced by a resolution step, emitted later by the caller."""

    level: int
    message: str


@dataclass
class PathResolution:
    """Outcome of credentials file path resolution."""

    path: Path | None
    notices: list[Notice] = field(default_factory=list)


@dataclass
class ProfileLookup:
    """Outcome of looking up a profile in parsed credentials.

    Attributes:
        entry: Credential entry with normalized keys, or None if absent
        split_fqdn: True when the profile was also found as nested tables
        notices: Warnings to surface to the operator
    """

    entry: dict[str, Any] | None
    split_fqdn: bool = False
    notices: list[Notice] = field(default_factory=list)
