"""Rolling availability calculation."""

import logging
from datetime import datetime, timedelta
from typing import Iterable

from ssh_uptime_monitor.models import ProbeRecord

logger = logging.getLogger(__name__)

UPTIME_WINDOW = timedelta(hours=24)


def compute_uptime(
    target_id: str,
    history: Iterable[ProbeRecord],
    now: datetime,
    window: timedelta = UPTIME_WINDOW,
) -> int:
    """Percentage of successful probes within the trailing window.

    Args:
        target_id: Target the history belongs to.
        history: Probe records in any order.
        now: Reference time for the window end.
        window: Length of the trailing window (24 hours by default).

    Returns:
        Integer 0-100, rounded half up. An empty window counts as 100.
    """
    cutoff = now - window
    total = 0
    successes = 0
    for record in history:
        if record.timestamp > cutoff:
            total += 1
            if record.succeeded:
                successes += 1

    if total == 0:
        logger.debug(f"No probes for {target_id} in the last {window}, reporting 100%")
        return 100

    # Integer form of floor(100 * s / n + 0.5)
    return (200 * successes + total) // (2 * total)
