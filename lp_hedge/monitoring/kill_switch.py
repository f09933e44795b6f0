"""
Kill switch for the poll loop.

Trips after too many consecutive failed cycles (venue outages, persistent
malformed data, a position that disappeared) so the process stops hammering
the venues. A successful cycle resets the failure streak in MetricsCollector.
"""

import logging
from typing import Optional

from lp_hedge.core.config import MonitoringConfig

logger = logging.getLogger(__name__)


class KillSwitch:
    """Halts polling once the consecutive-failure limit is reached."""

    def __init__(self, config: Optional[MonitoringConfig] = None):
        self.config = config or MonitoringConfig()
        self.triggered = False
        self.reason: Optional[str] = None

    def check(self, metrics: dict) -> bool:
        """
        Compare the failure streak in a metrics snapshot against the limit.

        Args:
            metrics: MetricsCollector.snapshot()

        Returns:
            True when polling should halt (reason is filled in)
        """
        streak = int(metrics.get("consecutive_failures") or 0)
        limit = self.config.max_consecutive_failures
        if streak < limit:
            return False
        self.reason = f"{streak} consecutive failed cycles (limit {limit}); last error: {metrics.get('last_error')}"
        return True

    def trigger(self, reason: str):
        self.triggered = True
        self.reason = reason
        logger.error("KILL SWITCH TRIGGERED: %s", reason)

    def reset(self):
        """Re-arm after the operator has fixed the cause."""
        if self.triggered:
            logger.warning("Kill switch reset (was: %s)", self.reason)
        self.triggered = False
        self.reason = None
