# manifold_ad/ad/hyperdual.py
# Second-order forward-mode numbers (independent from the tapes)

import numpy as np

from ..scalar import BinaryRule, UnaryRule, partial_rule


def _is_plain(x) -> bool:
    return isinstance(x, (int, float, np.number))


class HyperDual:
    """
    Hyper-dual number d0 + d1·ε₁ + d2·ε₂ + d3·ε₁ε₂ with ε₁² = ε₂² = 0:
    d0 = value
    d1 = derivative along the first seed direction
    d2 = derivative along the second seed direction
    d3 = mixed second derivative (e1ᵀ H e2)

    Seeding both directions with the same basis vector gives a diagonal
    Hessian entry in d3, different basis vectors an off-diagonal one.
    """
    __slots__ = ("_d0", "_d1", "_d2", "_d3")

    __array_ufunc__ = None  # NumPy scalars defer to the reflected operators

    def __init__(self, d0, d1=0.0, d2=0.0, d3=0.0):
        for c in (d0, d1, d2, d3):
            if not _is_plain(c):
                raise TypeError(f"HyperDual components must be real scalars, got {type(c).__name__}")
        self._d0 = np.float64(d0)
        self._d1 = np.float64(d1)
        self._d2 = np.float64(d2)
        self._d3 = np.float64(d3)

    @classmethod
    def create_variable(cls, value, e1=0.0, e2=0.0) -> "HyperDual":
        return cls(value, e1, e2)

    @property
    def d0(self):
        return self._d0

    @property
    def d1(self):
        return self._d1

    @property
    def d2(self):
        return self._d2

    @property
    def d3(self):
        return self._d3

    def with_seed(self, e1, e2=0.0) -> "HyperDual":
        """Same value, first-derivative slots set to (e1, e2), mixed slot cleared."""
        return HyperDual(self._d0, e1, e2)

    def __repr__(self):
        return f"HyperDual({self._d0!r}, {self._d1!r}, {self._d2!r}, {self._d3!r})"

    # ----- chain rule -----
    def apply_unary(self, rule: UnaryRule) -> "HyperDual":
        x0, x1, x2, x3 = self._d0, self._d1, self._d2, self._d3
        df = rule.df(x0)
        return HyperDual(rule.f(x0), df * x1, df * x2,
                         df * x3 + rule.d2f(x0) * x1 * x2)

    @classmethod
    def apply_binary(cls, rule: BinaryRule, x, y) -> "HyperDual":
        if not isinstance(x, HyperDual):
            return y.apply_unary(partial_rule(rule, x, constant_first=True))
        if not isinstance(y, HyperDual):
            return x.apply_unary(partial_rule(rule, y, constant_first=False))
        a, b = x._d0, y._d0
        fx, fy = rule.fx(a, b), rule.fy(a, b)
        e12 = (fx * x._d3 + fy * y._d3
               + rule.fxx(a, b) * x._d1 * x._d2
               + rule.fxy(a, b) * (x._d1 * y._d2 + y._d1 * x._d2)
               + rule.fyy(a, b) * y._d1 * y._d2)
        return HyperDual(rule.f(a, b), fx * x._d1 + fy * y._d1,
                         fx * x._d2 + fy * y._d2, e12)

    # ----- arithmetic -----
    def __add__(a, b):
        if isinstance(b, HyperDual):
            return HyperDual(a._d0 + b._d0, a._d1 + b._d1, a._d2 + b._d2, a._d3 + b._d3)
        if _is_plain(b):
            return HyperDual(a._d0 + b, a._d1, a._d2, a._d3)
        return NotImplemented
    __radd__ = __add__

    def __sub__(a, b):
        if isinstance(b, HyperDual):
            return HyperDual(a._d0 - b._d0, a._d1 - b._d1, a._d2 - b._d2, a._d3 - b._d3)
        if _is_plain(b):
            return HyperDual(a._d0 - b, a._d1, a._d2, a._d3)
        return NotImplemented

    def __rsub__(b, a):
        if _is_plain(a):
            return HyperDual(a - b._d0, -b._d1, -b._d2, -b._d3)
        return NotImplemented

    def __mul__(a, b):
        if isinstance(b, HyperDual):
            return HyperDual(a._d0 * b._d0,
                             a._d1 * b._d0 + a._d0 * b._d1,
                             a._d2 * b._d0 + a._d0 * b._d2,
                             a._d3 * b._d0 + a._d1 * b._d2 + a._d2 * b._d1 + a._d0 * b._d3)
        if _is_plain(b):
            return HyperDual(a._d0 * b, a._d1 * b, a._d2 * b, a._d3 * b)
        return NotImplemented
    __rmul__ = __mul__

    def __truediv__(a, b):
        from .ops.arithmetic import div
        if isinstance(b, HyperDual) or _is_plain(b):
            return div(a, b)
        return NotImplemented

    def __rtruediv__(b, a):
        from .ops.arithmetic import div
        if _is_plain(a):
            return div(a, b)
        return NotImplemented

    def __neg__(a):
        return HyperDual(-a._d0, -a._d1, -a._d2, -a._d3)

    def __pos__(a):
        return a

    def __pow__(a, b):
        from .ops.arithmetic import pow
        return pow(a, b)

    def __rpow__(b, a):
        from .ops.arithmetic import pow
        return pow(a, b)

    def __mod__(a, b):
        from .ops.arithmetic import mod
        return mod(a, b)

    def __rmod__(b, a):
        from .ops.arithmetic import mod
        return mod(a, b)

    # ----- comparison: ordering by value, equality by all components -----
    def __eq__(a, b):
        if not isinstance(b, HyperDual):
            return NotImplemented
        return (a._d0 == b._d0 and a._d1 == b._d1
                and a._d2 == b._d2 and a._d3 == b._d3)

    def __hash__(self):
        return hash((float(self._d0), float(self._d1), float(self._d2), float(self._d3)))

    def __lt__(a, b):
        return a._d0 < _value(b)

    def __le__(a, b):
        return a._d0 <= _value(b)

    def __gt__(a, b):
        return a._d0 > _value(b)

    def __ge__(a, b):
        return a._d0 >= _value(b)


def _value(x):
    return x.d0 if isinstance(x, HyperDual) else x
