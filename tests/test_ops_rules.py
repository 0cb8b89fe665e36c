"""Finite-difference checks of the derivative tables every mode reads from."""

import numpy as np
import pytest

from manifold_ad.scalar import (
    BINARY_RULES, UNARY_RULES, constant_base_rule, constant_power_rule, partial_rule,
)

H = 1e-6


def _d(f, x):
    return (f(x + H) - f(x - H)) / (2.0 * H)


# points inside each function's domain
UNARY_POINTS = {name: 0.4 for name in UNARY_RULES}
UNARY_POINTS["acosh"] = 1.3

BINARY_POINT = (1.3, 0.7)


@pytest.mark.parametrize("name", sorted(UNARY_RULES))
def test_unary_rule(name):
    rule = UNARY_RULES[name]
    x = UNARY_POINTS[name]
    assert rule.df(x) == pytest.approx(_d(rule.f, x), rel=1e-6, abs=1e-8)
    assert rule.d2f(x) == pytest.approx(_d(rule.df, x), rel=1e-6, abs=1e-8)


@pytest.mark.parametrize("name", sorted(BINARY_RULES))
def test_binary_rule(name):
    rule = BINARY_RULES[name]
    x, y = BINARY_POINT
    assert rule.fx(x, y) == pytest.approx(_d(lambda t: rule.f(t, y), x), rel=1e-6, abs=1e-8)
    assert rule.fy(x, y) == pytest.approx(_d(lambda t: rule.f(x, t), y), rel=1e-6, abs=1e-8)
    assert rule.fxx(x, y) == pytest.approx(_d(lambda t: rule.fx(t, y), x), rel=1e-6, abs=1e-8)
    assert rule.fxy(x, y) == pytest.approx(_d(lambda t: rule.fx(x, t), y), rel=1e-6, abs=1e-8)
    assert rule.fxy(x, y) == pytest.approx(_d(lambda t: rule.fy(t, y), x), rel=1e-6, abs=1e-8)
    assert rule.fyy(x, y) == pytest.approx(_d(lambda t: rule.fy(x, t), y), rel=1e-6, abs=1e-8)


def test_log_takes_base_second():
    assert BINARY_RULES["log"].f(8.0, 2.0) == pytest.approx(3.0)


def test_atan2_takes_ordinate_first():
    assert BINARY_RULES["atan2"].f(1.0, 0.0) == pytest.approx(np.pi / 2)


def test_constant_power_at_zero():
    square = constant_power_rule(2)
    assert (square.f(0.0), square.df(0.0), square.d2f(0.0)) == (0.0, 0.0, 2.0)
    identity = constant_power_rule(1)
    assert (identity.df(0.0), identity.d2f(0.0)) == (1.0, 0.0)
    assert constant_power_rule(0).df(0.0) == 0.0


def test_negative_integer_power():
    inv = constant_power_rule(-1)
    assert inv.f(2.0) == pytest.approx(0.5)
    assert inv.df(2.0) == pytest.approx(-0.25)


def test_constant_base_rule():
    rule = constant_base_rule(3.0)
    assert rule.df(2.0) == pytest.approx(9.0 * np.log(3.0))
    # non-positive bases have no exponent derivative
    assert constant_base_rule(-2.0).df(2.0) == 0.0


def test_partial_rule_freezes_one_operand():
    div = BINARY_RULES["div"]
    over_two = partial_rule(div, 2.0, constant_first=False)
    two_over = partial_rule(div, 2.0, constant_first=True)
    assert over_two.f(3.0) == 1.5 and over_two.df(3.0) == 0.5
    assert two_over.df(4.0) == pytest.approx(-0.125)
    assert two_over.d2f(4.0) == pytest.approx(2.0 * 2.0 / 64.0)
