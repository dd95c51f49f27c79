"""Per-step execution results handed to the run driver."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from menuload._internal.errors import ExecutionFailure

# Error message recorded when a request is abandoned on a stop signal or deadline.
CANCELLED = "cancelled"


class ExecutionStatus(Enum):
    """Outcome of a single step at the network level."""

    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class ExecutionResult:
    """Outcome of one step in one iteration.

    Any HTTP response counts as SUCCESS, whatever its status code; only
    network-level problems (refused connection, timeout, DNS, cancellation)
    are FAILURE.

    Attributes:
        step_name: Logical name of the step.
        method: HTTP method sent.
        url: Full request URL.
        status: SUCCESS or FAILURE.
        latency: Seconds from issuing the request to the response or failure.
        started_at: Executor clock reading when the request was issued.
        http_status_code: Response status, None when no response arrived.
        error: Failure description, None on success.
    """

    step_name: str
    method: str
    url: str
    status: ExecutionStatus
    latency: float
    started_at: float = 0.0
    http_status_code: int | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is ExecutionStatus.SUCCESS

    @property
    def cancelled(self) -> bool:
        return self.error == CANCELLED

    def raise_for_failure(self) -> None:
        """Raise ExecutionFailure if this step failed at the network level."""
        if not self.ok:
            raise ExecutionFailure(self.step_name, self.error or "unknown error")
