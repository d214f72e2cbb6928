"""
Climate Telemetry

Reads the last value of each series the scan needs from the thermostat,
weather and alarm-panel databases.
"""

import logging
from collections.abc import Iterable
from datetime import datetime, timezone
from typing import Any, Optional

import requests

from .exceptions import TelemetryError
from .influxdb_helper import InfluxDBClient, get_influxdb_config
from .models import Reading
from .settings import ClimatiseurSettings

_LOGGER = logging.getLogger(__name__)

NEST_DATABASE = "nest"
WXDATA_DATABASE = "wxdata"
FRONTPOINT_DATABASE = "frontpoint"


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO8601 timestamp into an aware datetime (UTC if unzoned)."""
    try:
        timestamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        raise TelemetryError(f"Invalid timestamp: {value!r}")
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def _last_point(series: dict[str, Any], label: str) -> Reading:
    try:
        point = series["values"][0]
        return Reading(label=label, value=point["last"], timestamp=parse_timestamp(point["time"]))
    except (KeyError, IndexError, TypeError) as e:
        raise TelemetryError(f"Malformed series for {label}: {e}")


def _quote(value: str) -> str:
    return value.replace("\\", "\\\\").replace("'", "\\'")


class ClimateTelemetry:
    """Telemetry collaborator over three InfluxDB databases."""

    def __init__(self, nest: InfluxDBClient, wxdata: InfluxDBClient, frontpoint: InfluxDBClient):
        self.nest = nest
        self.wxdata = wxdata
        self.frontpoint = frontpoint

    @classmethod
    def from_settings(cls, settings: ClimatiseurSettings) -> "ClimateTelemetry":
        """Create clients for the configured InfluxDB server."""
        section = settings.influxdb
        config = get_influxdb_config(section)
        session = requests.Session()

        def client(key: str, default: str) -> InfluxDBClient:
            return InfluxDBClient(
                config["url"],
                section.get(key, default),
                username=config["username"],
                password=config["password"],
                session=session,
            )

        return cls(
            client("nest_database", NEST_DATABASE),
            client("wxdata_database", WXDATA_DATABASE),
            client("frontpoint_database", FRONTPOINT_DATABASE),
        )

    def _single(self, client: InfluxDBClient, statement: str, label: str) -> Reading:
        result = client.query(statement)
        if not result:
            raise TelemetryError(f"No data found for {label}")
        return _last_point(result[0], label)

    def thermostat_mode(self, name: str) -> Reading:
        """Last HVAC mode reported by the named thermostat."""
        statement = f"select last(value) from hvac_mode where name_long = '{_quote(name)}'"
        return self._single(self.nest, statement, name)

    def indoor_temperature(self) -> Reading:
        return self._single(
            self.wxdata, "select last(value) from temperature_indoor", "indoor temperature"
        )

    def outdoor_temperature(self) -> Reading:
        return self._single(
            self.wxdata, "select last(value) from temperature_outdoor", "outdoor temperature"
        )

    def portal_readings(self, tracked: Optional[Iterable[str]] = None) -> list[Reading]:
        """Last state of each door/window sensor, labelled by description.

        Args:
            tracked: Descriptions to keep; other sensors are skipped before
                their values are parsed. None keeps every sensor.
        """
        tracked = None if tracked is None else set(tracked)
        result = self.frontpoint.query("select last(value) from state group by description")
        readings = []
        for series in result:
            description = series.get("tags", {}).get("description")
            if description is None:
                _LOGGER.debug("Skipping sensor series without description tag")
                continue
            if tracked is not None and description not in tracked:
                continue
            try:
                readings.append(_last_point(series, description))
            except TelemetryError as e:
                _LOGGER.error(f"Skipping sensor '{description}': {e}")
        return readings
