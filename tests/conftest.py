"""Pytest configuration for Climatiseur tests."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from core.climatiseur.exceptions import DeliveryError
from core.climatiseur.models import Reading
from core.climatiseur.settings import ClimatiseurSettings

NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_reading(label, value, age_seconds=60):
    """Reading taken age_seconds before NOW."""
    return Reading(label=label, value=value, timestamp=NOW - timedelta(seconds=age_seconds))


class FakeTelemetry:
    """In-memory telemetry collaborator."""

    def __init__(self, modes=None, indoor=None, outdoor=None, portals=None):
        self.modes = modes or {
            "Family Room Thermostat": make_reading("Family Room Thermostat", "heat"),
            "Living Room Thermostat": make_reading("Living Room Thermostat", "heat"),
        }
        self.indoor = indoor or make_reading("indoor temperature", 70.0)
        self.outdoor = outdoor or make_reading("outdoor temperature", 60.0)
        self.portals = portals if portals is not None else []

    def thermostat_mode(self, name):
        return self.modes[name]

    def indoor_temperature(self):
        return self.indoor

    def outdoor_temperature(self):
        return self.outdoor

    def portal_readings(self, tracked=None):
        return list(self.portals)


class FakeMailer:
    """Records deliveries; recipients in fail_for raise DeliveryError."""

    def __init__(self, fail_for=()):
        self.sent = []
        self.fail_for = set(fail_for)

    def deliver(self, to, sender, subject, body):
        if to in self.fail_for:
            raise DeliveryError(to, "relay refused")
        self.sent.append({"to": to, "from": sender, "subject": subject, "body": body})


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def settings():
    return ClimatiseurSettings(
        mail_delivery_defaults={"address": "smtp.example.com", "port": 587},
        sender="climatiseur@example.com",
        notify=("alice@example.com", "bob@example.com"),
        portals=frozenset({"Front Door", "Garage Door", "Kitchen Window"}),
        threshold=2.0,
    )


@pytest.fixture
def telemetry():
    return FakeTelemetry()


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def log():
    return MagicMock()
