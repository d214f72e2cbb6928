"""Provides helper functions to interact with InfluxDB for fetching telemetry.

Queries are InfluxQL statements sent to the v1 ``/query`` endpoint. Results are
flattened into a list of series, each ``{"tags": {...}, "values": [{...}, ...]}``
where every value row maps column name to value (e.g. ``time`` and ``last``).
"""

import logging
import os
from typing import Any, Optional

import requests
from dotenv import load_dotenv

from .exceptions import TelemetryError

_LOGGER = logging.getLogger(__name__)

DEFAULT_INFLUXDB_URL = "http://cube.local:8086"


def get_influxdb_config(section: Optional[dict] = None) -> dict:
    """Load InfluxDB config from the credentials section or fallback to .env."""
    section = section or {}
    config = {
        "url": section.get("url", ""),
        "username": section.get("username", ""),
        "password": section.get("password", ""),
    }
    if config["url"]:
        _LOGGER.debug("Loaded InfluxDB config from credentials")

    # Fallback to .env / environment for anything not in the credentials
    if not config["url"] or not config["username"]:
        try:
            load_dotenv()  # this loads from .env automatically
            config["url"] = config["url"] or os.getenv("CLIMATISEUR_INFLUX_URL", "")
            config["username"] = config["username"] or os.getenv("CLIMATISEUR_INFLUX_USER", "")
            config["password"] = config["password"] or os.getenv(
                "CLIMATISEUR_INFLUX_PASSWORD", ""
            )
            _LOGGER.debug("Loaded InfluxDB config from .env file")
        except Exception as e:
            _LOGGER.warning("Failed to load .env file: %s", str(e))

    if not config["url"]:
        config["url"] = DEFAULT_INFLUXDB_URL
        _LOGGER.debug("Using default InfluxDB URL %s", DEFAULT_INFLUXDB_URL)

    return config


class InfluxDBClient:
    """Minimal InfluxDB 1.x query client for a single database."""

    def __init__(
        self,
        url: str,
        database: str,
        username: str = "",
        password: str = "",
        timeout: float = 10,
        session: Optional[requests.Session] = None,
    ):
        """Initialize client.

        Args:
            url: InfluxDB base URL (e.g., "http://cube.local:8086")
            database: Database to query
            username: Optional user, sent as basic auth when set
            password: Password for username
            timeout: Request timeout in seconds
            session: Shared session for connection pooling
        """
        self.base_url = url.rstrip("/")
        self.database = database
        self.timeout = timeout
        self.session = session or requests.Session()
        self.auth = (username, password) if username else None

    def query(self, statement: str) -> list[dict[str, Any]]:
        """Run an InfluxQL statement.

        Args:
            statement: InfluxQL query

        Returns:
            List of series as ``{"tags": {...}, "values": [{column: value}]}``

        Raises:
            TelemetryError: If the request fails or InfluxDB reports an error
        """
        url = f"{self.base_url}/query"
        params = {"db": self.database, "q": statement}
        _LOGGER.debug("Querying %s: %s", self.database, statement)

        try:
            response = self.session.get(
                url, params=params, auth=self.auth, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TelemetryError(f"Error connecting to InfluxDB: {e}")

        if response.status_code != 200:
            raise TelemetryError(
                f"InfluxDB error {response.status_code} for {self.database}: {response.text}"
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise TelemetryError(f"InfluxDB returned invalid JSON: {e}")

        return parse_query_response(payload)


def parse_query_response(payload: dict) -> list[dict[str, Any]]:
    """Flatten an InfluxDB v1 JSON response into a list of series."""
    if not isinstance(payload, dict):
        raise TelemetryError("Unexpected InfluxDB response")
    if "error" in payload:
        raise TelemetryError(f"InfluxDB error: {payload['error']}")

    series_list = []
    for result in payload.get("results", []):
        if "error" in result:
            raise TelemetryError(f"InfluxDB query error: {result['error']}")

        for series in result.get("series", []):
            columns = series.get("columns", [])
            values = [dict(zip(columns, row)) for row in series.get("values", [])]
            series_list.append(
                {
                    "name": series.get("name"),
                    "tags": series.get("tags", {}),
                    "values": values,
                }
            )

    _LOGGER.debug("Parsed %d series from InfluxDB response", len(series_list))
    return series_list
