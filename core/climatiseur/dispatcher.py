"""Alert dispatch: log the decision and notify every recipient."""

import logging
from dataclasses import dataclass, field
from typing import Optional

from .exceptions import DeliveryError
from .models import Alert
from .settings import ClimatiseurSettings

_LOGGER = logging.getLogger(__name__)


@dataclass
class DispatchReport:
    """Recipients that did and did not receive the alert."""

    delivered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)


def dispatch(
    alert: Optional[Alert],
    settings: ClimatiseurSettings,
    mailer,
    dry_run: bool = False,
    logger=_LOGGER,
) -> DispatchReport:
    """Log the alert and, unless dry_run, mail it to each recipient.

    A failure for one recipient is logged and does not stop delivery
    to the others.
    """
    report = DispatchReport()
    if alert is None:
        logger.info("all's well!")
        return report

    logger.info(alert.subject)
    logger.info(alert.body)
    if dry_run:
        logger.info(f"dry run, not notifying {len(settings.notify)} recipient(s)")
        return report

    for recipient in settings.notify:
        try:
            mailer.deliver(recipient, settings.sender, alert.subject, alert.body)
        except DeliveryError as e:
            logger.error(str(e))
            report.failed.append(recipient)
            continue
        except Exception as e:
            logger.exception(f"Unexpected error notifying {recipient}: {e}")
            report.failed.append(recipient)
            continue
        logger.info(f"notified {recipient}")
        report.delivered.append(recipient)

    return report
