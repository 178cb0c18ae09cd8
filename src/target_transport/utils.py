"""Utility functions for target-transport."""

import logging
from collections.abc import Collection
from collections.abc import Iterable
from collections.abc import Mapping
from typing import Any

from .models import Notice


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries with overlay precedence.

    Recursively merges nested dictionaries. Non-dict values in overlay
    completely replace corresponding values in base.

    Args:
        base: Base dictionary
        overlay: Overlay dictionary (takes precedence)

    Returns:
        New merged dictionary (base and overlay are not modified)

    Examples:
        >>> base = {"target_mode": {"host": "a", "port": 22}}
        >>> overlay = {"target_mode": {"host": "b"}, "log_level": "info"}
        >>> deep_merge(base, overlay)
        {'target_mode': {'host': 'b', 'port': 22}, 'log_level': 'info'}

        >>> deep_merge({}, {"a": 1})
        {'a': 1}
    """
    result = base.copy()

    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def filter_options(options: Mapping[str, Any], allowed: Collection[str]) -> dict[str, Any]:
    """Keep only the options whose key is in the allow-list.

    Examples:
        >>> filter_options({"a": 1, "c": 3}, {"a", "b"})
        {'a': 1}
    """
    return {key: value for key, value in options.items() if key in allowed}


def emit_notices(notices: Iterable[Notice], logger: logging.Logger) -> None:
    """Log each notice at its own level, in order."""
    for notice in notices:
        logger.log(notice.level, notice.message)
