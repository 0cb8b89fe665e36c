"""Tests for hyper-dual numbers."""

import math

import numpy as np
import pytest

from manifold_ad import HyperDual
from manifold_ad.ad import ops


def _second(fn, x0):
    """d²fn/dx² at x0 from one hyper-dual pass."""
    return fn(HyperDual(x0, 1.0, 1.0)).d3


class TestHyperDualConstruction:

    def test_components(self):
        h = HyperDual(1.0, 2.0, 3.0, 4.0)
        assert (h.d0, h.d1, h.d2, h.d3) == (1.0, 2.0, 3.0, 4.0)

    def test_with_seed_sets_first_slots(self):
        h = HyperDual(2.0, 5.0, 5.0, 5.0).with_seed(1.0)
        assert h == HyperDual(2.0, 1.0, 0.0, 0.0)
        assert HyperDual(2.0).with_seed(1.0, 1.0) == HyperDual(2.0, 1.0, 1.0)

    def test_create_variable(self):
        assert HyperDual.create_variable(3.0, 1.0, 0.0) == HyperDual(3.0, 1.0, 0.0, 0.0)

    def test_rejects_non_numbers(self):
        with pytest.raises(TypeError):
            HyperDual(1.0, None)


class TestHyperDualArithmetic:

    def test_product_mixed_entry(self):
        # x·y with ε₁ on x and ε₂ on y: ∂²/∂x∂y = 1
        x = HyperDual(2.0, 1.0, 0.0)
        y = HyperDual(3.0, 0.0, 1.0)
        p = x * y
        assert p == HyperDual(6.0, 3.0, 2.0, 1.0)

    def test_square(self):
        assert _second(lambda x: x * x, 3.0) == pytest.approx(2.0)

    def test_reciprocal(self):
        assert _second(lambda x: 1.0 / x, 2.0) == pytest.approx(0.25)

    def test_quotient(self):
        # d²/dx² (x / (1 + x)) = -2 / (1 + x)³
        assert _second(lambda x: x / (1.0 + x), 1.0) == pytest.approx(-0.25)

    def test_add_sub_neg(self):
        a, b = HyperDual(1.0, 1.0, 2.0, 3.0), HyperDual(2.0, 1.0, 1.0, 1.0)
        assert a + b == HyperDual(3.0, 2.0, 3.0, 4.0)
        assert a - b == HyperDual(-1.0, 0.0, 1.0, 2.0)
        assert 1.0 - a == HyperDual(0.0, -1.0, -2.0, -3.0)
        assert -a == HyperDual(-1.0, -1.0, -2.0, -3.0)

    @pytest.mark.parametrize("fn, d2", [
        (ops.sin, -math.sin(0.4)),
        (ops.cos, -math.cos(0.4)),
        (ops.exp, math.exp(0.4)),
        (ops.ln, -1.0 / 0.16),
        (ops.sqrt, -0.25 / 0.4 ** 1.5),
        (ops.sinh, math.sinh(0.4)),
        (lambda x: x ** 3, 6.0 * 0.4),
        (lambda x: 2.0 ** x, math.log(2.0) ** 2 * 2.0 ** 0.4),
    ])
    def test_elementary_second_derivatives(self, fn, d2):
        assert _second(fn, 0.4) == pytest.approx(d2)

    def test_binary_power_mixed_entry(self):
        # ∂²(x^y)/∂x∂y = x^(y-1) (1 + y ln x)
        x = HyperDual(2.0, 1.0, 0.0)
        y = HyperDual(3.0, 0.0, 1.0)
        assert (x ** y).d3 == pytest.approx(4.0 * (1.0 + 3.0 * math.log(2.0)))

    def test_chain_rule_second_order(self):
        # d²/dx² exp(x²) = (2 + 4x²) exp(x²)
        x0 = 0.7
        expected = (2.0 + 4.0 * x0 * x0) * math.exp(x0 * x0)
        assert _second(lambda x: ops.exp(x * x), x0) == pytest.approx(expected)

    def test_ordering_uses_value(self):
        assert HyperDual(1.0, 9.0) < HyperDual(2.0)
        assert HyperDual(2.0) > 1.5

    def test_numpy_scalar_operand(self):
        h = np.float64(2.0) + HyperDual(1.0, 1.0)
        assert h == HyperDual(3.0, 1.0)
