"""Credential profile loading for remote targets.

Credentials files are TOML with one table per target, keyed by host name:

    ['host.example.org']
    user = "admin"
    key_files = "~/.ssh/id_rsa"

A common mistake is leaving the host name unquoted. TOML then reads
[host.example.org] as nested tables ({"host": {"example": {"org": {}}}}),
which is detected here and reported as a warning.
"""

import logging
import sys
import tomllib
from collections.abc import Callable
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from .exceptions import CredentialsFileError
from .models import Notice
from .models import ProfileLookup
from .models import TargetConfig
from .paths import default_credentials_path
from .paths import resolve_credentials_path
from .utils import emit_notices

logger = logging.getLogger(__name__)

HOSTNAME_QUOTING_HINT = "Hostnames must be surrounded by single quotes, e.g. ['host.example.org']"


def parse_credentials_file(path: Path | None) -> dict[str, Any] | None:
    """Parse a TOML credentials file.

    Args:
        path: Path to the credentials file

    Returns:
        Parsed credentials, or None if path is None or not a file

    Raises:
        CredentialsFileError: If the file cannot be read or is not valid TOML
    """
    if path is None or not path.is_file():
        return None

    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise CredentialsFileError(f"Invalid TOML in credentials file {path}: {e}") from e
    except OSError as e:
        raise CredentialsFileError(f"Failed to read credentials file {path}: {e}") from e


def is_split_fqdn(raw: Mapping[str, Any], profile: str) -> bool:
    """Check whether a dotted profile name was parsed into nested tables.

    Args:
        raw: Parsed credentials
        profile: Profile name, usually a host name

    Returns:
        True if every segment of the profile name is found as a nested key

    Examples:
        >>> is_split_fqdn({"host": {"example": {"org": {}}}}, "host.example.org")
        True
        >>> is_split_fqdn({"host.example.org": {}}, "host.example.org")
        False
    """
    segments = profile.split(".")
    if segments[0] not in raw:
        return False

    matches = 1
    current: Any = raw
    for i in range(len(segments) - 1):
        value = current.get(segments[i])
        # ran out of depth before running out of segments
        if not isinstance(value, Mapping):
            return False
        if segments[i + 1] in value:
            matches += 1
            if matches == len(segments):
                return True
        current = value

    return False


def lookup_profile(raw: Mapping[str, Any] | None, profile: str, *, source: Path | str | None = None) -> ProfileLookup:
    """Find the credential entry for a profile.

    The profile name is always looked up as one literal key. A split host
    name only adds warnings, it never changes which entry is returned.

    Args:
        raw: Parsed credentials (None when there is no credentials file)
        profile: Profile name
        source: Credentials file the data came from, used in messages

    Returns:
        ProfileLookup with the entry (keys normalized) and any warnings

    Raises:
        CredentialsFileError: If the profile exists but is not a table
    """
    if raw is None:
        return ProfileLookup(entry=None)

    notices = []
    split = is_split_fqdn(raw, profile)
    if split:
        message = f"Credentials file {source} contains target '{profile}' as a table, expected a string."
        notices.append(Notice(logging.WARNING, message))
        notices.append(Notice(logging.WARNING, HOSTNAME_QUOTING_HINT))

    entry = raw.get(profile)
    if entry is None:
        return ProfileLookup(entry=None, split_fqdn=split, notices=notices)

    if not isinstance(entry, Mapping):
        raise CredentialsFileError(f"Credentials for target '{profile}' in {source} must be a table")

    normalized = {sys.intern(str(key)): value for key, value in entry.items()}
    return ProfileLookup(entry=normalized, split_fqdn=split, notices=notices)


def load_credentials(
    config: TargetConfig,
    *,
    default_path: Path | None = None,
    fallback: Callable[[], Path | None] = default_credentials_path,
    log: logging.Logger | None = None,
) -> dict[str, Any] | None:
    """Load the credential profile for a target.

    Resolves the credentials file, parses it and looks up config.host.
    Notices from each step are logged through log (module logger by default).

    Args:
        config: Target configuration context
        default_path: Host-specific path override, see resolve_credentials_path
        fallback: Parent credentials path provider
        log: Logger for debug and warning output

    Returns:
        Credential entry for the target, or None

    Raises:
        InvalidConfigError: If an explicit credentials file is missing
        CredentialsFileError: If the credentials file cannot be parsed
    """
    log = log or logger

    resolution = resolve_credentials_path(config, default_path=default_path, fallback=fallback)
    emit_notices(resolution.notices, log)

    raw = parse_credentials_file(resolution.path)
    lookup = lookup_profile(raw, config.host, source=resolution.path)
    emit_notices(lookup.notices, log)

    return lookup.entry
