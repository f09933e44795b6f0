"""
Precision helpers for on-chain amounts and futures order sizes.

On-chain amounts arrive as unsigned fixed-point integers; order quantities
are quantized to the configured delta step before being sent as strings.
"""

import math

from lp_hedge.core.errors import ConfigurationError, MalformedDataError

# AMM tokens are assumed to use 18 decimals (no per-token ERC-20 lookup).
AMM_TOKEN_DECIMALS = 18


def from_fixed_point(value: int, decimals: int = AMM_TOKEN_DECIMALS, field_name: str = "amount") -> float:
    """
    Convert an unsigned fixed-point integer to a float.

    Args:
        value: Raw integer amount (e.g. a uint256 read from a contract)
        decimals: Number of implied decimal places
        field_name: Name used in the error message

    Returns:
        value / 10**decimals
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedDataError(field_name, value, "expected an integer amount")
    if value < 0:
        raise MalformedDataError(field_name, value, "amount must be unsigned")
    return value / (10 ** decimals)


def round_to_step(value: float, step: float) -> float:
    """
    Round value to the nearest multiple of step, halves away from zero.

    A non-positive step disables rounding and returns value unchanged.
    """
    if step <= 0:
        return value
    steps = value / step
    rounded = math.floor(abs(steps) + 0.5)
    return math.copysign(rounded, steps) * step


def quantity_decimals(step: float) -> int:
    """Decimal places implied by step: 0 for step >= 1, else ceil(log10(1/step))."""
    if step <= 0:
        raise ConfigurationError(f"step must be > 0, got {step}")
    if step >= 1:
        return 0
    return max(0, math.ceil(math.log10(1.0 / step)))


def format_quantity(quantity: float, step: float) -> str:
    """
    Format an order quantity with the precision derived from step.

    Examples:
        format_quantity(7.0, 1) -> "7"
        format_quantity(7.3, 0.1) -> "7.3"
        format_quantity(7.25, 0.01) -> "7.25"
    """
    prec = quantity_decimals(step)
    return f"{quantity:.{prec}f}"
