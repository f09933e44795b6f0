"""Tests for fixed-point conversion, step rounding and quantity formatting."""
import pytest

from lp_hedge.core.errors import ConfigurationError, MalformedDataError
from lp_hedge.utils.math_helpers import base_delta, delta_ratio
from lp_hedge.utils.precision import format_quantity, from_fixed_point, quantity_decimals, round_to_step


def test_from_fixed_point_uses_18_decimals():
    assert from_fixed_point(12 * 10 ** 18) == 12.0
    assert from_fixed_point(5 * 10 ** 17) == 0.5
    assert from_fixed_point(0) == 0.0


def test_from_fixed_point_handles_values_beyond_uint128():
    raw = 2 ** 200
    assert from_fixed_point(raw) == pytest.approx(raw / 1e18)


def test_from_fixed_point_rejects_signed_or_non_integer():
    with pytest.raises(MalformedDataError):
        from_fixed_point(-1)
    with pytest.raises(MalformedDataError):
        from_fixed_point("1000")
    with pytest.raises(MalformedDataError):
        from_fixed_point(1.5)


def test_round_to_step_is_multiple_of_step():
    for value in [0.37, 7.0, 7.26, 13.049, 100.0]:
        for step in [1.0, 0.5, 0.1, 0.01]:
            q = round_to_step(value, step)
            assert q >= 0
            assert q / step == pytest.approx(round(q / step))


def test_round_to_step_halves_away_from_zero():
    assert round_to_step(2.5, 1.0) == 3.0
    assert round_to_step(1.25, 0.5) == 1.5
    assert round_to_step(2.4, 1.0) == 2.0


def test_round_to_step_zero_step_returns_value():
    assert round_to_step(7.123, 0) == 7.123
    assert round_to_step(7.123, -1.0) == 7.123


def test_quantity_decimals_from_step():
    assert quantity_decimals(1) == 0
    assert quantity_decimals(5) == 0
    assert quantity_decimals(0.1) == 1
    assert quantity_decimals(0.01) == 2
    assert quantity_decimals(0.001) == 3


def test_format_quantity_precision():
    assert format_quantity(7.0, 1) == "7"
    assert format_quantity(7.300000000000001, 0.1) == "7.3"
    assert format_quantity(7.25, 0.01) == "7.25"


def test_format_quantity_rejects_non_positive_step():
    with pytest.raises(ConfigurationError):
        format_quantity(1.0, 0)


def test_delta_ratio_properties():
    assert delta_ratio(10, -10) == 0
    assert delta_ratio(10, 0) == 1
    assert delta_ratio(0, 0) == 0
    assert delta_ratio(12, -5) == pytest.approx(7 / 12)
    assert delta_ratio(3, -10) == pytest.approx(-0.7)
    assert base_delta(3, -10) == -7


def test_delta_ratio_denominator_floored_near_zero():
    # Both legs tiny: denominator is epsilon, ratio stays finite
    assert delta_ratio(1e-9, 0) == pytest.approx(0.1)
