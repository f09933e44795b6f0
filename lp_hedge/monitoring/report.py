"""
Status report formatting.

Renders a PositionSnapshot through a named-parameter template so the
wording can be swapped without touching the computation.
"""

from typing import Any, Dict

from lp_hedge.monitor.snapshot import PositionSnapshot

DEFAULT_TEMPLATE = (
    "[{symbol}] block {block_number}\n"
    "{label} holding: {base_amount:.4f} ({base_value_usdt:.4f} USDT)\n"
    "Delta ratio: {ratio_pct:.2f}%\n"
    "Total value: {total_value_usdt:.4f} USDT\n"
    "Collectable: {collectable_base:.4f} {label} ({collectable_base_value_usdt:.4f} USDT)"
    " + {collectable_usdt:.4f} USDT = {collectable_value_usdt:.4f} USDT"
)


def report_params(snapshot: PositionSnapshot, label: str) -> Dict[str, Any]:
    """Named parameters available to report templates."""
    return {
        "label": label,
        "symbol": snapshot.symbol,
        "block_number": snapshot.block_number,
        "base_amount": snapshot.amm_base_amount,
        "base_value_usdt": snapshot.amm_base_value_usdt,
        "base_price_usdt": snapshot.base_price_usdt,
        "futures_position": snapshot.futures_position,
        "unrealized_pnl": snapshot.unrealized_pnl,
        "base_delta": snapshot.base_delta,
        "ratio_pct": snapshot.base_delta_ratio * 100.0,
        "amm_total_value_usdt": snapshot.amm_total_value_usdt,
        "total_value_usdt": snapshot.total_value_usdt,
        "collectable_base": snapshot.amm_collectable_base,
        "collectable_base_value_usdt": snapshot.amm_collectable_base * snapshot.base_price_usdt,
        "collectable_usdt": snapshot.amm_collectable_usdt,
        "collectable_value_usdt": snapshot.amm_collectable_value_usdt,
    }


def format_report(snapshot: PositionSnapshot, label: str, template: str = DEFAULT_TEMPLATE) -> str:
    """
    Render a multi-line status report.

    Args:
        snapshot: Cycle snapshot
        label: Base asset name shown to the reader (e.g. "BNB")
        template: str.format template using report_params() names

    Returns:
        Report text
    """
    return template.format(**report_params(snapshot, label))


class ReportFormatter:
    """Formatter bound to a label and template."""

    def __init__(self, label: str, template: str = DEFAULT_TEMPLATE):
        self.label = label
        self.template = template

    def format(self, snapshot: PositionSnapshot) -> str:
        return format_report(snapshot, self.label, self.template)
