"""
Climate Snapshot

Collects indoor/outdoor temperatures and the open/closed portal sets for
one cycle. Temperature staleness aborts the cycle; a stale portal sensor
is skipped so the remaining portals can still be evaluated.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timedelta
from numbers import Number
from typing import Optional

from .models import ClimateSnapshot, Ok, Outcome, PortalState, Reading, is_ok
from .settings import ClimatiseurSettings
from .staleness import check_fresh

_LOGGER = logging.getLogger(__name__)

PORTAL_CLOSED = 0
PORTAL_OPEN = 1


def portal_state(reading: Reading) -> Optional[PortalState]:
    """Interpret a sensor value: 0 is closed, 1 is open, anything else is unknown."""
    value = reading.value
    if isinstance(value, bool) or not isinstance(value, Number):
        return None
    if value == PORTAL_CLOSED:
        return PortalState(name=reading.label, is_open=False)
    if value == PORTAL_OPEN:
        return PortalState(name=reading.label, is_open=True)
    return None


def classify_portals(
    readings: Iterable[Reading],
    allow_list: Iterable[str],
    now: datetime,
    max_age: timedelta,
    logger=_LOGGER,
) -> tuple[frozenset[str], frozenset[str]]:
    """Split tracked portal readings into (open, closed) name sets.

    Readings for untracked portals, stale readings and values other than
    0 (closed) or 1 (open) are left out of both sets.
    """
    tracked = set(allow_list)
    open_portals: set[str] = set()
    closed_portals: set[str] = set()

    for reading in readings:
        if reading.label not in tracked:
            continue

        if not is_ok(check_fresh(reading, now, max_age)):
            logger.error(f"'{reading.label}' sensor measurement is stale, skipping")
            continue

        state = portal_state(reading)
        if state is None:
            logger.debug(f"Ignoring unrecognized state {reading.value!r} for '{reading.label}'")
        elif state.is_open:
            open_portals.add(state.name)
        else:
            closed_portals.add(state.name)

    return frozenset(open_portals), frozenset(closed_portals - open_portals)


def build_snapshot(
    telemetry,
    settings: ClimatiseurSettings,
    mode: str,
    now: datetime,
    logger=_LOGGER,
) -> Outcome:
    """Assemble the ClimateSnapshot for this cycle.

    Args:
        telemetry: Collaborator providing temperature and portal readings
        settings: Run settings (portal allow-list, max age)
        mode: Resolved thermostat mode
        now: Instant captured at the start of the cycle
        logger: Logger for this run

    Returns:
        Ok(ClimateSnapshot), or Stale for a stale temperature reading
    """
    max_age = settings.max_age
    temperatures = []
    for reading in (telemetry.indoor_temperature(), telemetry.outdoor_temperature()):
        checked = check_fresh(reading, now, max_age)
        if not is_ok(checked):
            return checked
        logger.info(f"{reading.label} is {reading.value}")
        temperatures.append(float(reading.value))
    indoor_temp, outdoor_temp = temperatures

    open_portals, closed_portals = classify_portals(
        telemetry.portal_readings(settings.portals),
        settings.portals,
        now,
        max_age,
        logger=logger,
    )
    logger.info(f"closed ({len(closed_portals)}) {sorted(closed_portals)}")
    logger.info(f"open ({len(open_portals)}) {sorted(open_portals)}")

    return Ok(
        ClimateSnapshot(
            thermostat=mode,
            indoor_temp=indoor_temp,
            outdoor_temp=outdoor_temp,
            open_portals=open_portals,
            closed_portals=closed_portals,
        )
    )
