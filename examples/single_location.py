"""Scenario file for ``menuload probe``.

Fetches the location list, pauses, then requests a cache refresh. Run with:

    menuload probe examples/single_location.py --base-url http://localhost:3000
"""

from __future__ import annotations

from menuload import Scenario, graphql_step, refresh_step

LOCATION_NAMES = "{ query { locations { name id } } }"

locations_then_refresh = Scenario(
    "locations-then-refresh",
    [
        graphql_step(LOCATION_NAMES, delay_after=0.5, name="Location Names"),
        refresh_step(name="Request Refresh"),
    ],
)
