"""
Climate Scanner

Runs one evaluation cycle: thermostat consensus, snapshot, rules, dispatch.
Each stage returns an outcome and the cycle stops at the first one that is
not Ok. Nothing is kept between cycles.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from .dispatcher import dispatch
from .models import (
    STATUS_ALERT,
    STATUS_ALL_WELL,
    STATUS_DISAGREEMENT,
    STATUS_ERROR,
    STATUS_STALE,
    Disagreement,
    Outcome,
    ScanResult,
    Stale,
    is_ok,
)
from .rules import evaluate_snapshot
from .settings import ClimatiseurSettings
from .snapshot import build_snapshot
from .thermostat import resolve_mode

_LOGGER = logging.getLogger(__name__)


class ClimateScanner:
    """Decides whether open portals are undermining heating or cooling."""

    def __init__(self, settings: ClimatiseurSettings, telemetry, mailer, logger=_LOGGER):
        """Initialize scanner.

        Args:
            settings: Run settings
            telemetry: Collaborator returning Readings (see ClimateTelemetry)
            mailer: Collaborator with deliver(to, sender, subject, body)
            logger: Logger for this invocation
        """
        self.settings = settings
        self.telemetry = telemetry
        self.mailer = mailer
        self.logger = logger

    def scan(self, dry_run: bool = False, now: Optional[datetime] = None) -> ScanResult:
        """Run one cycle. Never raises; failures are logged and reported."""
        try:
            return self._scan(dry_run, now or datetime.now(timezone.utc))
        except Exception as e:
            self.logger.exception(f"Scan failed: {e}")
            return ScanResult(status=STATUS_ERROR, detail=f"{type(e).__name__}: {e}")

    def _scan(self, dry_run: bool, now: datetime) -> ScanResult:
        settings = self.settings

        mode_outcome = resolve_mode(
            self.telemetry.thermostat_mode(settings.family_room_thermostat),
            self.telemetry.thermostat_mode(settings.living_room_thermostat),
            now,
            settings.max_age,
        )
        if not is_ok(mode_outcome):
            return self._aborted(mode_outcome)
        mode = mode_outcome.value
        self.logger.info(f"thermostat set to '{mode}'")

        snapshot_outcome = build_snapshot(self.telemetry, settings, mode, now, logger=self.logger)
        if not is_ok(snapshot_outcome):
            return self._aborted(snapshot_outcome, mode=mode)
        snapshot = snapshot_outcome.value

        alert = evaluate_snapshot(snapshot, threshold=settings.threshold)
        report = dispatch(alert, settings, self.mailer, dry_run=dry_run, logger=self.logger)

        return ScanResult(
            status=STATUS_ALERT if alert else STATUS_ALL_WELL,
            mode=mode,
            snapshot=snapshot,
            alert=alert,
            delivered=report.delivered,
            failed=report.failed,
        )

    def _aborted(self, outcome: Outcome, mode: Optional[str] = None) -> ScanResult:
        if isinstance(outcome, Stale):
            detail = f"'{outcome.label}' measurement is stale"
            self.logger.error(f"{detail} ({int(outcome.age.total_seconds())}s old)")
            return ScanResult(status=STATUS_STALE, mode=mode, detail=detail)

        if isinstance(outcome, Disagreement):
            detail = (
                f"thermostats disagree: family room is '{outcome.family_room}', "
                f"living room is '{outcome.living_room}'"
            )
            self.logger.error(detail)
            return ScanResult(status=STATUS_DISAGREEMENT, mode=mode, detail=detail)

        raise TypeError(f"Unexpected outcome: {outcome!r}")
