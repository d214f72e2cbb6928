"""
Imbalance Rules

Alert when indoors and outdoors are incorrectly balanced:
  - heating, warmer outside, and every portal closed
  - heating, colder outside, and some portal open
  - cooling, warmer outside, and some portal open
  - cooling, colder outside, and every portal closed

Differences within +/- threshold never alert.
"""

from collections.abc import Collection
from typing import Optional

from .models import Alert, ClimateSnapshot
from .settings import DEFAULT_THRESHOLD

HEAT_MODE = "heat"
COOL_MODE = "cool"

WARMER_OUTSIDE = "It's warmer outside, please open some more doors and windows"
COOLER_OUTSIDE = "It's cooler outside, please open some more doors and windows"
COLD_OUTSIDE = "Close the doors! It's cold outside!"
HOT_OUTSIDE = "Close the doors! It's hot outside!"


def _open_some(closed_portals: Collection[str]) -> str:
    return "\n".join(["You might open one of these:"] + sorted(closed_portals))


def _close_these(open_portals: Collection[str]) -> str:
    return f"Why would you have the {' & '.join(sorted(open_portals))} open?"


def evaluate(
    mode: str,
    indoor_temp: float,
    outdoor_temp: float,
    open_portals: Collection[str],
    closed_portals: Collection[str],
    threshold: float = DEFAULT_THRESHOLD,
) -> Optional[Alert]:
    """Return the alert for this combination, or None when all is well."""
    delta = outdoor_temp - indoor_temp
    warmer = delta > threshold
    colder = delta < -threshold
    any_open = len(open_portals) > 0

    if mode == HEAT_MODE and warmer and not any_open:
        return Alert(WARMER_OUTSIDE, _open_some(closed_portals))
    if mode == HEAT_MODE and colder and any_open:
        return Alert(COLD_OUTSIDE, _close_these(open_portals))
    if mode == COOL_MODE and warmer and any_open:
        return Alert(HOT_OUTSIDE, _close_these(open_portals))
    if mode == COOL_MODE and colder and not any_open:
        return Alert(COOLER_OUTSIDE, _open_some(closed_portals))
    return None


def evaluate_snapshot(snapshot: ClimateSnapshot, threshold: float = DEFAULT_THRESHOLD) -> Optional[Alert]:
    """Evaluate the rules against a snapshot."""
    return evaluate(
        snapshot.thermostat,
        snapshot.indoor_temp,
        snapshot.outdoor_temp,
        snapshot.open_portals,
        snapshot.closed_portals,
        threshold=threshold,
    )
