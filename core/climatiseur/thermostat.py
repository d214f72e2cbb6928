"""
Thermostat Consensus

The family room thermostat is authoritative; the living room thermostat
must agree with it unless either of them is in eco mode.
"""

from datetime import datetime, timedelta

from .models import Disagreement, Ok, Outcome, Reading, is_ok
from .staleness import check_fresh

ECO_MODE = "eco"


def resolve_mode(
    family_room: Reading, living_room: Reading, now: datetime, max_age: timedelta
) -> Outcome:
    """Merge the two thermostat mode readings into one.

    Returns:
        Ok(mode), Stale for the first stale reading, or Disagreement
    """
    for reading in (family_room, living_room):
        checked = check_fresh(reading, now, max_age)
        if not is_ok(checked):
            return checked

    family_mode = str(family_room.value)
    living_mode = str(living_room.value)

    if family_mode != living_mode and ECO_MODE not in (family_mode, living_mode):
        return Disagreement(family_room=family_mode, living_room=living_mode)

    return Ok(family_mode)
