"""Climatiseur heating/cooling imbalance alerts."""

# Define public API
__all__ = [
    "ClimatiseurSettings",
    "load_settings",
    "Alert",
    "ClimateSnapshot",
    "ScanResult",
    "ClimateScanner",
    "ClimateTelemetry",
    "Mailer",
]

# Import settings
from .settings import ClimatiseurSettings, load_settings

# Import models
from .models import Alert, ClimateSnapshot, ScanResult

# Import pipeline and collaborators
from .scanner import ClimateScanner
from .telemetry import ClimateTelemetry
from .mailer import Mailer
