"""
Climatiseur Custom Exceptions

Simple exception hierarchy for error handling.
Stale readings and thermostat disagreement are not exceptions; they are
returned as outcome variants (see models).
"""


class ClimatiseurError(Exception):
    """Base exception for Climatiseur."""

    pass


class ConfigurationError(ClimatiseurError):
    """Configuration is invalid."""

    pass


class TelemetryError(ClimatiseurError):
    """Time-series store is unreachable or returned unusable data."""

    pass


class DeliveryError(ClimatiseurError):
    """Notification could not be delivered to a recipient."""

    def __init__(self, recipient: str, reason: str):
        super().__init__(f"Failed to deliver to {recipient}: {reason}")
        self.recipient = recipient
        self.reason = reason
