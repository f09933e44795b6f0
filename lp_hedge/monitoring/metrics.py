"""
Metrics Collector

Tracks cycle outcomes: successes, failures, consecutive failures,
actions taken and the latest exposure readings.
"""

from typing import Optional

from lp_hedge.core.config import MonitoringConfig
from lp_hedge.execution.orders import RebalanceAction
from lp_hedge.monitor.snapshot import PositionSnapshot


class MetricsCollector:
    """Collects per-cycle metrics for logging and the kill switch."""

    def __init__(self, config: Optional[MonitoringConfig] = None):
        self.config = config or MonitoringConfig()
        self.metrics = {
            "cycles": 0,
            "failures": 0,
            "consecutive_failures": 0,
            "actions": {"none": 0, "increase": 0, "decrease": 0},
            "last_ratio": None,
            "last_delta": None,
            "last_block": None,
            "last_error": None,
        }

    def record_cycle(self, snapshot: PositionSnapshot, action: RebalanceAction):
        self.metrics["cycles"] += 1
        self.metrics["consecutive_failures"] = 0
        self.metrics["actions"][action.kind.value] += 1
        self.metrics["last_ratio"] = snapshot.base_delta_ratio
        self.metrics["last_delta"] = snapshot.base_delta
        self.metrics["last_block"] = snapshot.block_number

    def record_failure(self, error: Exception):
        self.metrics["failures"] += 1
        self.metrics["consecutive_failures"] += 1
        self.metrics["last_error"] = f"{type(error).__name__}: {error}"

    def snapshot(self) -> dict:
        out = dict(self.metrics)
        out["actions"] = dict(self.metrics["actions"])
        return out
