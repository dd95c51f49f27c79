"""Scenario definition and the global scenario registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from menuload._internal.errors import InvalidStepError, ScenarioLoadError
from menuload.dsl.step import Step

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


class Scenario:
    """An ordered, non-empty sequence of steps run once per iteration.

    Scenarios are immutable after construction, so one instance can be
    replayed by any number of concurrent iterations.

    Attributes:
        name: Human-readable name for this scenario.
    """

    __slots__ = ("_name", "_steps")

    def __init__(self, name: str, steps: Iterable[Step]) -> None:
        """Assemble a scenario from a literal list of steps.

        Args:
            name: Human-readable name for this scenario.
            steps: Steps in execution order.

        Raises:
            InvalidStepError: If no steps are given or an element is not
                a Step.
        """
        collected = tuple(steps)
        if not collected:
            msg = f"Scenario {name!r} has no steps. At least one step is required."
            raise InvalidStepError(msg)
        for index, step in enumerate(collected):
            if not isinstance(step, Step):
                msg = f"Scenario {name!r} step {index} is not a Step: {step!r}"
                raise InvalidStepError(msg)
        self._name = name
        self._steps = collected

    @property
    def name(self) -> str:
        return self._name

    def steps(self) -> tuple[Step, ...]:
        """Return the steps in execution order."""
        return self._steps

    def __len__(self) -> int:
        return len(self._steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self._steps)

    def __repr__(self) -> str:
        return f"Scenario(name={self._name!r}, steps={len(self._steps)})"


class ScenarioRegistry:
    """Registry of named scenarios.

    The catalog registers the built-in menu scenarios here at import time.
    """

    def __init__(self) -> None:
        self._scenarios: dict[str, Scenario] = {}

    def register(self, scenario: Scenario) -> Scenario:
        """Register a scenario under its name.

        Args:
            scenario: The scenario to register.

        Returns:
            The same scenario, so registration can wrap construction.

        Raises:
            ScenarioLoadError: If the name is already taken.
        """
        if scenario.name in self._scenarios:
            msg = f"Scenario {scenario.name!r} is already registered"
            raise ScenarioLoadError(msg)
        self._scenarios[scenario.name] = scenario
        return scenario

    def get(self, name: str) -> Scenario | None:
        return self._scenarios.get(name)

    def get_all(self) -> list[Scenario]:
        return list(self._scenarios.values())

    def clear(self) -> None:
        """Remove all registered scenarios. Primarily for testing."""
        self._scenarios.clear()

    def __len__(self) -> int:
        return len(self._scenarios)

    def __contains__(self, name: object) -> bool:
        return name in self._scenarios


# Global singleton registry.
registry = ScenarioRegistry()
