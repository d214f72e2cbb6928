"""
Climatiseur Data Models

Everything here lives for a single evaluation cycle.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")

# Scan statuses
STATUS_ALERT = "alert"
STATUS_ALL_WELL = "all_well"
STATUS_STALE = "stale"
STATUS_DISAGREEMENT = "disagreement"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class Reading:
    """Last value of a series, as reported by the telemetry store."""

    label: str  # series name or tag value, used in log and stale reports
    value: Any
    timestamp: datetime  # timezone-aware


@dataclass(frozen=True)
class PortalState:
    """Open/closed state of a tracked door or window."""

    name: str
    is_open: bool


@dataclass(frozen=True)
class ClimateSnapshot:
    """Indoor/outdoor conditions and portal states for one cycle."""

    thermostat: str
    indoor_temp: float
    outdoor_temp: float
    open_portals: frozenset[str] = field(default_factory=frozenset)
    closed_portals: frozenset[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class Alert:
    """Notification produced when heating/cooling is being undermined."""

    subject: str
    body: str


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Stage succeeded."""

    value: T


@dataclass(frozen=True)
class Stale:
    """A reading was older than the freshness threshold."""

    label: str
    age: timedelta


@dataclass(frozen=True)
class Disagreement:
    """The two thermostats report different modes and neither is eco."""

    family_room: str
    living_room: str


Outcome = Union[Ok, Stale, Disagreement]


def is_ok(outcome: Outcome) -> bool:
    """Return True if the stage outcome carries a usable value."""
    return isinstance(outcome, Ok)


@dataclass
class ScanResult:
    """Summary of one evaluation cycle."""

    status: str
    mode: Optional[str] = None
    snapshot: Optional[ClimateSnapshot] = None
    alert: Optional[Alert] = None
    detail: Optional[str] = None
    delivered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
