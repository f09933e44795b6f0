"""Rebalance Decision Engine: threshold rule on hedge drift."""

from lp_hedge.rebalance.engine import RebalanceEngine, decide

__all__ = ["RebalanceEngine", "decide"]
