"""Run configuration for menuload."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import TYPE_CHECKING

from menuload._internal.errors import ConfigurationError
from menuload._internal.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = get_logger("config")

DEFAULT_BASE_URL = "https://graphql.ucsc.menu"
DEFAULT_TIMEOUT = 30.0
DEFAULT_POOL_SIZE = 100

# Option names accepted in an overrides mapping.
RECOGNIZED_OPTIONS = frozenset({"base_url", "request_timeout", "connection_pool_size"})


@dataclass(frozen=True)
class HarnessConfig:
    """Configuration for one run.

    Attributes:
        base_url: Base URL of the menu service under test.
        request_timeout: Per-request timeout in seconds.
        connection_pool_size: Maximum pooled connections shared by all
            iterations using one executor.
    """

    base_url: str = DEFAULT_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT
    connection_pool_size: int = DEFAULT_POOL_SIZE


def _parse_timeout(value: object, source: str) -> float:
    try:
        timeout = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        msg = f"{source} must be a number, got: {value!r}"
        raise ConfigurationError(msg) from None

    if not math.isfinite(timeout) or timeout <= 0:
        msg = f"{source} must be positive, got: {timeout}"
        raise ConfigurationError(msg)
    return timeout


def _parse_pool_size(value: object, source: str) -> int:
    if isinstance(value, bool):
        msg = f"{source} must be an integer, got: {value!r}"
        raise ConfigurationError(msg)
    try:
        pool_size = int(value)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        msg = f"{source} must be an integer, got: {value!r}"
        raise ConfigurationError(msg) from None

    if pool_size < 1:
        msg = f"{source} must be >= 1, got: {pool_size}"
        raise ConfigurationError(msg)
    return pool_size


def load_base_url(overrides: Mapping[str, object] | None = None) -> str:
    """Return the configured base URL without reading any other option.

    The ``base_url`` override wins over ``MENULOAD_BASE_URL``, which wins
    over the built-in default. The URL itself is not validated here.

    Raises:
        ConfigurationError: If the override is not a string.
    """
    base_url = (overrides or {}).get("base_url")
    if base_url is None:
        return os.environ.get("MENULOAD_BASE_URL", DEFAULT_BASE_URL)
    if not isinstance(base_url, str):
        msg = f"base_url must be a string, got: {base_url!r}"
        raise ConfigurationError(msg)
    return base_url


def load_config(overrides: Mapping[str, object] | None = None) -> HarnessConfig:
    """Build configuration from environment variables and explicit overrides.

    Environment variables:
        MENULOAD_BASE_URL: Base URL (default: ``https://graphql.ucsc.menu``).
        MENULOAD_TIMEOUT: Request timeout in seconds (default: 30.0).
        MENULOAD_POOL_SIZE: Connection pool size (default: 100).

    Overrides take precedence over the environment. Keys other than
    ``base_url``, ``request_timeout`` and ``connection_pool_size`` are
    ignored.

    Args:
        overrides: Optional mapping of option name to value.

    Returns:
        Populated HarnessConfig instance.

    Raises:
        ConfigurationError: If a value is malformed or out of range.
    """
    base_url = load_base_url(overrides)
    timeout = _parse_timeout(
        os.environ.get("MENULOAD_TIMEOUT", str(DEFAULT_TIMEOUT)), "MENULOAD_TIMEOUT"
    )
    pool_size = _parse_pool_size(
        os.environ.get("MENULOAD_POOL_SIZE", str(DEFAULT_POOL_SIZE)), "MENULOAD_POOL_SIZE"
    )

    for key, value in (overrides or {}).items():
        if key not in RECOGNIZED_OPTIONS:
            logger.debug("Ignoring unrecognized option %r", key)
            continue
        if value is None:
            continue
        if key == "request_timeout":
            timeout = _parse_timeout(value, "request_timeout")
        elif key == "connection_pool_size":
            pool_size = _parse_pool_size(value, "connection_pool_size")

    return HarnessConfig(
        base_url=base_url,
        request_timeout=timeout,
        connection_pool_size=pool_size,
    )
