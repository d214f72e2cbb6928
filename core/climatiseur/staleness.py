"""Freshness check applied to every reading before it is used."""

from datetime import datetime, timedelta
from typing import Union

from .models import Ok, Reading, Stale


def check_fresh(reading: Reading, now: datetime, max_age: timedelta) -> Union[Ok, Stale]:
    """Pass the reading through if it is no older than max_age.

    ``now`` must be captured once per cycle so that every reading is judged
    against the same instant.
    """
    age = now - reading.timestamp
    if age > max_age:
        return Stale(label=reading.label, age=age)
    return Ok(reading)
