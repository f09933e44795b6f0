"""Utilities: Precision helpers, hedge math, state store."""

from lp_hedge.utils.precision import format_quantity, from_fixed_point, round_to_step
from lp_hedge.utils.math_helpers import base_delta, delta_ratio
from lp_hedge.utils.state_store import StateStore

__all__ = [
    "format_quantity",
    "from_fixed_point",
    "round_to_step",
    "base_delta",
    "delta_ratio",
    "StateStore",
]
