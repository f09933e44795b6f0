"""
Rebalance Decision Engine

Applies the threshold rule to a snapshot's delta/ratio pair and yields
an order instruction for the futures leg.

Rule:
- Trigger only if base_delta_ratio > n and |base_delta| > m (strict)
- Quantity = |base_delta| rounded to the nearest multiple of m
- base_delta > 0: Increase (open more short)
- base_delta < 0: Decrease (reduce-only close of the short)

The ratio test is signed: a large negative delta never triggers.
"""

import logging

from lp_hedge.core.config import StrategyConfig
from lp_hedge.execution.orders import RebalanceAction
from lp_hedge.monitor.snapshot import PositionSnapshot
from lp_hedge.utils.precision import format_quantity, round_to_step

logger = logging.getLogger(__name__)


def decide(ratio: float, delta: float, cfg: StrategyConfig) -> RebalanceAction:
    """
    Decide the rebalance action for one cycle.

    Args:
        ratio: base_delta_ratio
        delta: base_delta (base units)
        cfg: Strategy thresholds (n = ratio_threshold, m = delta_threshold)

    Returns:
        RebalanceAction
    """
    n = cfg.ratio_threshold
    m = cfg.delta_threshold

    # m > 0 is enforced by StrategyConfig, so this also covers delta == 0
    if ratio <= n or abs(delta) <= m:
        return RebalanceAction.none()

    quantity = format_quantity(round_to_step(abs(delta), m), m)
    if delta > 0:
        return RebalanceAction.increase(quantity)
    return RebalanceAction.decrease(quantity)


class RebalanceEngine:
    """Threshold-based rebalancing bound to one StrategyConfig."""

    def __init__(self, config: StrategyConfig):
        self.config = config

    def decide(self, ratio: float, delta: float) -> RebalanceAction:
        return decide(ratio, delta, self.config)

    def decide_snapshot(self, snapshot: PositionSnapshot) -> RebalanceAction:
        """Run the rule on a snapshot's ratio and delta."""
        action = self.decide(snapshot.base_delta_ratio, snapshot.base_delta)
        logger.info(
            "Decision for %s: %s (delta=%.6f ratio=%.4f n=%s m=%s)",
            snapshot.symbol, action, snapshot.base_delta, snapshot.base_delta_ratio,
            self.config.ratio_threshold, self.config.delta_threshold,
        )
        return action
