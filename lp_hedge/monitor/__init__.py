"""Snapshot Builder: merges AMM and futures positions into one snapshot."""

from lp_hedge.monitor.snapshot import AmmPositionRecord, CexPosition, PositionSnapshot, build_snapshot, open_positions

__all__ = ["AmmPositionRecord", "CexPosition", "PositionSnapshot", "build_snapshot", "open_positions"]
