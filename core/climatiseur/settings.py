"""
Climatiseur Configuration Settings

Loaded once per run from the YAML credentials file and never modified
afterwards. Keys may be written in snake_case, camelCase, or with a
leading colon (``:notify:``) as older credential files do.
"""

import os
import re
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Optional

import yaml

from .exceptions import ConfigurationError

DEFAULT_CREDENTIALS_PATH = os.path.join(
    os.path.expanduser("~"), ".credentials", "climatiseur.yaml"
)
CREDENTIALS_ENV = "CLIMATISEUR_CREDENTIALS"

DEFAULT_THRESHOLD = 2.0  # degrees between outdoor and indoor before alerting
DEFAULT_MAX_AGE_SECONDS = 5000
DEFAULT_FAMILY_ROOM_THERMOSTAT = "Family Room Thermostat"
DEFAULT_LIVING_ROOM_THERMOSTAT = "Living Room Thermostat"

REQUIRED_KEYS = ("mail_delivery_defaults", "sender", "notify", "portals")


def _camel_to_snake(name: str) -> str:
    """Convert camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def _normalize_key(key: Any) -> str:
    return _camel_to_snake(str(key).lstrip(":"))


def _normalize_mapping(data: dict) -> dict:
    return {_normalize_key(k): v for k, v in data.items()}


@dataclass(frozen=True)
class ClimatiseurSettings:
    """Credentials, recipients and decision parameters for a run."""

    mail_delivery_defaults: dict[str, Any]
    sender: str
    notify: tuple[str, ...]
    portals: frozenset[str]
    threshold: float = DEFAULT_THRESHOLD
    max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS
    family_room_thermostat: str = DEFAULT_FAMILY_ROOM_THERMOSTAT
    living_room_thermostat: str = DEFAULT_LIVING_ROOM_THERMOSTAT
    influxdb: dict[str, Any] = field(default_factory=dict)

    @property
    def max_age(self) -> timedelta:
        return timedelta(seconds=self.max_age_seconds)

    @classmethod
    def from_dict(cls, data: dict) -> "ClimatiseurSettings":
        """Create from dictionary."""
        if not isinstance(data, dict):
            raise ConfigurationError("Credentials must be a mapping")
        converted = _normalize_mapping(data)

        missing = [key for key in REQUIRED_KEYS if key not in converted]
        if missing:
            raise ConfigurationError(f"Missing required settings: {', '.join(missing)}")

        mail = converted["mail_delivery_defaults"] or {}
        if not isinstance(mail, dict):
            raise ConfigurationError("mail_delivery_defaults must be a mapping")
        converted["mail_delivery_defaults"] = _normalize_mapping(mail)
        converted["influxdb"] = _normalize_mapping(converted.get("influxdb") or {})

        # Single recipient/portal may be given as a bare string
        notify = converted["notify"]
        converted["notify"] = tuple([notify] if isinstance(notify, str) else notify or [])
        portals = converted["portals"]
        converted["portals"] = frozenset([portals] if isinstance(portals, str) else portals or [])

        try:
            converted["threshold"] = float(converted.get("threshold", DEFAULT_THRESHOLD))
            converted["max_age_seconds"] = float(
                converted.get("max_age_seconds", DEFAULT_MAX_AGE_SECONDS)
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid numeric setting: {e}")
        if converted["threshold"] < 0:
            raise ConfigurationError("threshold must be non-negative")
        if converted["max_age_seconds"] <= 0:
            raise ConfigurationError("max_age_seconds must be positive")

        known = set(cls.__dataclass_fields__)
        unknown = set(converted) - known
        if unknown:
            raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")

        return cls(**converted)


def load_settings(path: Optional[str] = None) -> ClimatiseurSettings:
    """Load settings from the YAML credentials file.

    Args:
        path: Credentials file; defaults to $CLIMATISEUR_CREDENTIALS or
            ~/.credentials/climatiseur.yaml

    Raises:
        ConfigurationError: If the file is missing, unreadable or incomplete
    """
    path = path or os.environ.get(CREDENTIALS_ENV) or DEFAULT_CREDENTIALS_PATH
    try:
        with open(os.path.expanduser(path)) as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Credentials file not found: {path}")
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Cannot read credentials file {path}: {e}")

    return ClimatiseurSettings.from_dict(data or {})
