"""
Climatiseur API Endpoints
"""

import os
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from loguru import logger
from pydantic import BaseModel

from core.climatiseur.exceptions import ConfigurationError
from core.climatiseur.mailer import Mailer
from core.climatiseur.models import ScanResult
from core.climatiseur.scanner import ClimateScanner
from core.climatiseur.settings import load_settings
from core.climatiseur.telemetry import ClimateTelemetry

router = APIRouter()

CREDENTIALS_PATH = os.environ.get("CLIMATISEUR_CREDENTIALS")


class AlertResponse(BaseModel):
    subject: str
    body: str


class SnapshotResponse(BaseModel):
    thermostat: str
    indoor_temp: float
    outdoor_temp: float
    open_portals: list[str]
    closed_portals: list[str]


class ScanResponse(BaseModel):
    status: str
    mode: Optional[str] = None
    detail: Optional[str] = None
    snapshot: Optional[SnapshotResponse] = None
    alert: Optional[AlertResponse] = None
    delivered: list[str] = []
    failed: list[str] = []

    @classmethod
    def from_result(cls, result: ScanResult) -> "ScanResponse":
        snapshot = None
        if result.snapshot:
            snapshot = SnapshotResponse(
                thermostat=result.snapshot.thermostat,
                indoor_temp=result.snapshot.indoor_temp,
                outdoor_temp=result.snapshot.outdoor_temp,
                open_portals=sorted(result.snapshot.open_portals),
                closed_portals=sorted(result.snapshot.closed_portals),
            )
        alert = None
        if result.alert:
            alert = AlertResponse(subject=result.alert.subject, body=result.alert.body)
        return cls(
            status=result.status,
            mode=result.mode,
            detail=result.detail,
            snapshot=snapshot,
            alert=alert,
            delivered=result.delivered,
            failed=result.failed,
        )


def get_scanner() -> ClimateScanner:
    """Build a scanner with freshly loaded settings for this request."""
    try:
        settings = load_settings(CREDENTIALS_PATH)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        raise HTTPException(status_code=503, detail=str(e))

    return ClimateScanner(
        settings,
        ClimateTelemetry.from_settings(settings),
        Mailer(settings.mail_delivery_defaults),
        logger=logger,
    )


@router.get("/api/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


@router.post("/api/scan", response_model=ScanResponse)
def run_scan(
    dry_run: bool = Query(False, description="Log the alert without sending mail"),
    scanner: ClimateScanner = Depends(get_scanner),
):
    """Run one scan cycle and return its outcome."""
    logger.info(f"Scan requested (dry_run={dry_run})")
    result = scanner.scan(dry_run=dry_run)
    return ScanResponse.from_result(result)
