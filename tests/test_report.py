"""Tests for the status report formatter."""
from lp_hedge.monitor.snapshot import build_snapshot
from lp_hedge.monitoring.report import ReportFormatter, format_report, report_params

from conftest import amm_record, cex_position, make_cfg


def _snapshot(base=12.0, futures="-5", pnl="-25.5", fee_base=0.5, fee_usdt=10.0):
    return build_snapshot(
        {1: amm_record(base=base, fee_base=fee_base, fee_usdt=fee_usdt)},
        [cex_position(futures, unrealized_pnl=pnl)],
        make_cfg(),
        4242,
    )


def test_report_contains_holding_ratio_total_and_yield():
    text = format_report(_snapshot(), "BNB")
    lines = text.splitlines()

    assert lines[0] == "[BNB] block 4242"
    assert "BNB holding: 12.0000 (7200.0000 USDT)" in text
    assert "Delta ratio: 58.33%" in text
    assert "Total value: 10174.5000 USDT" in text
    assert "Collectable: 0.5000 BNB (300.0000 USDT) + 10.0000 USDT = 310.0000 USDT" in text


def test_negative_values_render_with_sign():
    text = format_report(_snapshot(base=3.0, futures="-10", pnl="-20000"), "BNB")
    assert "Delta ratio: -70.00%" in text
    assert "Total value: -15200.0000 USDT" in text


def test_zero_values_render():
    text = format_report(_snapshot(base=0.0, futures="0", pnl="0", fee_base=0.0, fee_usdt=0.0), "ETH")
    assert "ETH holding: 0.0000 (0.0000 USDT)" in text
    assert "Delta ratio: 0.00%" in text
    assert "= 0.0000 USDT" in text


def test_custom_template_uses_named_parameters():
    fmt = ReportFormatter("BNB", template="{label} Δ {base_delta:+.2f} / {ratio_pct:.1f}% @ {base_price_usdt:.0f}")
    assert fmt.format(_snapshot()) == "BNB Δ +7.00 / 58.3% @ 600"


def test_report_params_are_consistent_with_snapshot():
    snap = _snapshot()
    params = report_params(snap, "BNB")
    assert params["collectable_value_usdt"] == snap.amm_collectable_value_usdt
    assert params["base_value_usdt"] == snap.amm_base_amount * snap.base_price_usdt
    assert params["ratio_pct"] == snap.base_delta_ratio * 100.0
