"""Target resolution: where a run sends its requests."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from menuload._internal.config import HarnessConfig, load_base_url
from menuload._internal.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

_ALLOWED_SCHEMES = ("http", "https")


@dataclass(frozen=True)
class Target:
    """The resolved base URL for a run.

    Attributes:
        base_url: Absolute http(s) URL, kept exactly as configured.
    """

    base_url: str

    def url_for(self, path: str) -> str:
        """Join the base URL and a relative path with a single slash."""
        if not path:
            return self.base_url
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"


def _validate_base_url(base_url: str) -> None:
    parts = urlsplit(base_url)
    if parts.scheme not in _ALLOWED_SCHEMES:
        msg = f"base_url must be an absolute http(s) URL, got: {base_url!r}"
        raise ConfigurationError(msg)
    try:
        host = parts.hostname
        parts.port  # noqa: B018
    except ValueError as exc:
        msg = f"base_url is malformed: {base_url!r} ({exc})"
        raise ConfigurationError(msg) from None
    if not host:
        msg = f"base_url must include a host, got: {base_url!r}"
        raise ConfigurationError(msg)


def resolve(configuration: HarnessConfig | Mapping[str, object] | None = None) -> Target:
    """Resolve the run's Target from configuration.

    Args:
        configuration: A ``HarnessConfig``, a mapping of options (only
            ``base_url`` matters here; unrecognized keys are ignored), or
            None to read the environment. Only ``base_url`` is read, so
            malformed timeout or pool-size settings do not affect it.

    Returns:
        An immutable Target.

    Raises:
        ConfigurationError: If the base URL has no http(s) scheme or no host.
    """
    if isinstance(configuration, HarnessConfig):
        base_url = configuration.base_url
    else:
        base_url = load_base_url(configuration)

    _validate_base_url(base_url)
    return Target(base_url=base_url)
