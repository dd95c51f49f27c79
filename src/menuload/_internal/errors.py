"""Custom exception hierarchy for menuload."""

from __future__ import annotations


class MenuLoadError(Exception):
    """Base exception for all menuload errors.

    Catch this to handle any harness-specific error with a single
    except clause.
    """


class ConfigurationError(MenuLoadError):
    """Raised when run configuration is invalid.

    Fatal at startup: a run never proceeds past a bad configuration.

    Examples:
        - ``base_url`` lacks a scheme or host.
        - ``MENULOAD_TIMEOUT`` is not a positive number.
    """


class InvalidStepError(MenuLoadError):
    """Raised when a step or scenario definition is malformed.

    Examples:
        - A POST step without a body.
        - A negative ``delay_after``.
        - A scenario with no steps.
    """


class ScenarioLoadError(MenuLoadError):
    """Raised when a scenario cannot be found or loaded from a file."""


class ExecutionFailure(MenuLoadError):
    """A network-level failure of a single step.

    The executor never raises this itself; failures are captured into
    ``ExecutionResult`` objects. Callers that prefer exceptions can call
    ``ExecutionResult.raise_for_failure()``.
    """

    def __init__(self, step_name: str, error: str) -> None:
        super().__init__(f"{step_name}: {error}")
        self.step_name = step_name
        self.error = error
