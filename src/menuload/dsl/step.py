"""HTTP step definitions and builders for GraphQL and refresh requests."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass

from menuload._internal.errors import InvalidStepError

SUPPORTED_METHODS = frozenset({"GET", "POST", "PUT"})

GRAPHQL_PATH = "/graphql"
REFRESH_PATH = "/request_refresh"


@dataclass(frozen=True)
class Step:
    """A single HTTP request within a scenario.

    Attributes:
        method: HTTP method, one of GET, POST or PUT. Lower-case input is
            normalized to upper-case.
        path: Path relative to the target's base URL.
        body: Opaque request payload. Sent as JSON when present.
        delay_after: Seconds to pause after the request completes.
        name: Logical name for reporting. Defaults to ``"<METHOD> <path>"``.

    Raises:
        InvalidStepError: On an unsupported method, a non-string path, a
            negative or non-finite delay, or a POST without a body.
    """

    method: str
    path: str
    body: bytes | None = None
    delay_after: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.method, str) or self.method.upper() not in SUPPORTED_METHODS:
            msg = f"Unsupported method {self.method!r}; expected one of {sorted(SUPPORTED_METHODS)}"
            raise InvalidStepError(msg)
        method = self.method.upper()
        object.__setattr__(self, "method", method)

        if not isinstance(self.path, str):
            msg = f"Step path must be a string, got: {self.path!r}"
            raise InvalidStepError(msg)

        if self.body is not None and not isinstance(self.body, bytes):
            msg = f"Step body must be bytes, got: {type(self.body).__name__}"
            raise InvalidStepError(msg)

        if method == "POST" and not self.body:
            msg = f"POST step {self.path!r} requires a non-empty body"
            raise InvalidStepError(msg)

        try:
            delay = float(self.delay_after)
        except (TypeError, ValueError):
            msg = f"delay_after must be a number, got: {self.delay_after!r}"
            raise InvalidStepError(msg) from None
        if not math.isfinite(delay) or delay < 0:
            msg = f"delay_after must be a non-negative number, got: {self.delay_after!r}"
            raise InvalidStepError(msg)
        object.__setattr__(self, "delay_after", delay)

        if not self.name:
            object.__setattr__(self, "name", f"{method} {self.path}")


def graphql_step(
    query: str,
    *,
    path: str = GRAPHQL_PATH,
    delay_after: float = 0.0,
    name: str = "",
) -> Step:
    """Build a POST step carrying ``{"query": query}`` as its JSON body.

    The query text is treated as opaque and is not validated.

    Args:
        query: GraphQL document text.
        path: Endpoint path. Defaults to ``/graphql``.
        delay_after: Seconds to pause after the request.
        name: Logical name for reporting.

    Returns:
        The constructed Step.
    """
    body = json.dumps({"query": query}).encode("utf-8")
    return Step("POST", path, body=body, delay_after=delay_after, name=name)


def refresh_step(*, path: str = REFRESH_PATH, delay_after: float = 0.0, name: str = "") -> Step:
    """Build the body-less PUT that asks the service to refresh its menu cache."""
    return Step("PUT", path, delay_after=delay_after, name=name)
