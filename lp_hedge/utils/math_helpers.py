"""
Hedge exposure math.

Net delta between the AMM leg and the futures leg, and its normalized ratio.
"""

# Floor on the ratio denominator so both legs at zero stay defined.
EPSILON = 1e-8


def base_delta(amm_base: float, futures_position: float) -> float:
    """Net base exposure: AMM holding plus signed futures position."""
    return amm_base + futures_position


def base_reference(amm_base: float, futures_position: float, epsilon: float = EPSILON) -> float:
    """Larger of the two leg magnitudes, floored at epsilon."""
    return max(abs(amm_base), abs(futures_position), epsilon)


def delta_ratio(amm_base: float, futures_position: float, epsilon: float = EPSILON) -> float:
    """
    Compute the normalized hedge drift.

    Args:
        amm_base: Base amount held in the LP position
        futures_position: Signed futures size (negative = short)
        epsilon: Denominator floor

    Returns:
        (amm_base + futures_position) / max(|amm_base|, |futures_position|, epsilon)
    """
    return base_delta(amm_base, futures_position) / base_reference(amm_base, futures_position, epsilon)
