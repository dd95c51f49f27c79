"""Built-in menu-service scenarios.

One parameterized scenario covers every variant of the menu workload:
fetch the location list, fetch the full menu tree, and optionally ask
the service to refresh its cache. Variants differ only in pacing and in
whether the refresh call is made.
"""

from __future__ import annotations

from menuload._internal.errors import ScenarioLoadError
from menuload.dsl.scenario import Scenario, registry
from menuload.dsl.step import Step, graphql_step, refresh_step

LOCATIONS_QUERY = """
    query Request {
      query {
        locations {
            name
            id
        }
      }
    }"""

MENU_TREE_QUERY = """
    query Request {
      query {
        locations {
          menus {
            date
            meals {
              mealType
              sections {
                name
                foodItems {
                    name
                }
              }
            }
          }
        }
      }
    }"""


def menu_scenario(
    name: str,
    *,
    locations_delay: float = 0.0,
    menus_delay: float = 0.0,
    refresh: bool = False,
) -> Scenario:
    """Build the menu browsing workload.

    Args:
        name: Scenario name.
        locations_delay: Pause in seconds after the location list query.
        menus_delay: Pause in seconds after the menu tree query.
        refresh: Append a ``PUT /request_refresh`` step.

    Returns:
        A two- or three-step Scenario.
    """
    steps: list[Step] = [
        graphql_step(LOCATIONS_QUERY, delay_after=locations_delay, name="Locations"),
        graphql_step(MENU_TREE_QUERY, delay_after=menus_delay, name="Menu Tree"),
    ]
    if refresh:
        steps.append(refresh_step(name="Request Refresh"))
    return Scenario(name, steps)


MENU_BROWSE = registry.register(menu_scenario("menu-browse"))
MENU_BROWSE_PACED = registry.register(
    menu_scenario("menu-browse-paced", locations_delay=0.1, menus_delay=1.0)
)
MENU_BROWSE_REFRESH = registry.register(menu_scenario("menu-browse-refresh", refresh=True))


def get_scenario(name: str) -> Scenario:
    """Look up a registered scenario by name.

    Raises:
        ScenarioLoadError: If no scenario has that name.
    """
    scenario = registry.get(name)
    if scenario is None:
        known = ", ".join(sorted(s.name for s in registry.get_all())) or "none"
        msg = f"Unknown scenario {name!r}. Known scenarios: {known}"
        raise ScenarioLoadError(msg)
    return scenario
