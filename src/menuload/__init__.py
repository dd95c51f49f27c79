"""menuload: scripted HTTP load scenarios for the UCSC menu service."""

from __future__ import annotations

from menuload._internal.config import HarnessConfig, load_config
from menuload._internal.errors import (
    ConfigurationError,
    ExecutionFailure,
    InvalidStepError,
    MenuLoadError,
    ScenarioLoadError,
)
from menuload.dsl.catalog import get_scenario, menu_scenario
from menuload.dsl.scenario import Scenario
from menuload.dsl.step import Step, graphql_step, refresh_step
from menuload.engine.executor import RequestExecutor
from menuload.engine.result import ExecutionResult, ExecutionStatus
from menuload.engine.runner import IterationRunner, run_iteration
from menuload.engine.target import Target, resolve

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "ExecutionFailure",
    "ExecutionResult",
    "ExecutionStatus",
    "HarnessConfig",
    "InvalidStepError",
    "IterationRunner",
    "MenuLoadError",
    "RequestExecutor",
    "Scenario",
    "ScenarioLoadError",
    "Step",
    "Target",
    "get_scenario",
    "graphql_step",
    "load_config",
    "menu_scenario",
    "refresh_step",
    "resolve",
    "run_iteration",
]
