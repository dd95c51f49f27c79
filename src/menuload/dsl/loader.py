"""Load user-written scenarios from Python files."""

from __future__ import annotations

import importlib.util
import sys
from pathlib import Path
from types import ModuleType

from menuload._internal.errors import MenuLoadError, ScenarioLoadError
from menuload._internal.logging import get_logger
from menuload.dsl.scenario import Scenario

logger = get_logger("dsl.loader")


def _import_file(path: Path) -> ModuleType:
    module_name = f"menuload_scenario_{path.stem}"
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        msg = f"Could not create module spec for: {path}"
        raise ScenarioLoadError(msg)

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except MenuLoadError:
        # Malformed steps surface as InvalidStepError, unwrapped.
        sys.modules.pop(module_name, None)
        raise
    except Exception as exc:
        sys.modules.pop(module_name, None)
        msg = f"Failed to import scenario file {path}: {exc}"
        raise ScenarioLoadError(msg) from exc
    return module


def find_scenarios(file_path: str | Path) -> list[Scenario]:
    """Import a ``.py`` file and return its module-level scenarios in definition order.

    Raises:
        ScenarioLoadError: If the file is missing, is not a ``.py`` file,
            cannot be imported, or defines no Scenario.
        InvalidStepError: If the file builds a malformed step or scenario.
    """
    path = Path(file_path)
    if not path.is_file():
        msg = f"Scenario file not found: {path}"
        raise ScenarioLoadError(msg)
    if path.suffix != ".py":
        msg = f"Scenario file must be a .py file, got: {path}"
        raise ScenarioLoadError(msg)

    module = _import_file(path)
    scenarios = [obj for obj in vars(module).values() if isinstance(obj, Scenario)]
    if not scenarios:
        msg = f"No Scenario found in {path}. Define at least one module-level Scenario."
        raise ScenarioLoadError(msg)
    return scenarios


def load_scenario(file_path: str | Path, name: str | None = None) -> Scenario:
    """Load one scenario from a Python file.

    Args:
        file_path: Path to the Python scenario file.
        name: Scenario name to select when the file defines several.
            Defaults to the first one defined.

    Returns:
        The selected Scenario.

    Raises:
        ScenarioLoadError: As for ``find_scenarios``, or if ``name`` matches
            none of the file's scenarios.
        InvalidStepError: If the file builds a malformed step or scenario.
    """
    scenarios = find_scenarios(file_path)

    if name is None:
        if len(scenarios) > 1:
            logger.debug(
                "%s defines %d scenarios; using %r",
                file_path,
                len(scenarios),
                scenarios[0].name,
            )
        return scenarios[0]

    for scenario in scenarios:
        if scenario.name == name:
            return scenario

    available = ", ".join(repr(s.name) for s in scenarios)
    msg = f"No scenario named {name!r} in {file_path}. Available: {available}"
    raise ScenarioLoadError(msg)
