# manifold_ad/ad/dual.py
# First-order forward-mode numbers (independent from the tapes)

import numpy as np

from ..scalar import BinaryRule, UnaryRule, partial_rule


def _is_plain(x) -> bool:
    return isinstance(x, (int, float, np.number))


class Dual:
    """
    Dual number d0 + d1·ε with ε² = 0:
    d0 = value
    d1 = derivative along the seeded direction
    """
    __slots__ = ("_d0", "_d1")

    __array_ufunc__ = None  # NumPy scalars defer to the reflected operators

    def __init__(self, d0, d1=0.0):
        if not (_is_plain(d0) and _is_plain(d1)):
            raise TypeError(f"Dual components must be real scalars, got "
                            f"{type(d0).__name__} and {type(d1).__name__}")
        self._d0 = np.float64(d0)
        self._d1 = np.float64(d1)

    @classmethod
    def create_variable(cls, value, seed=0.0) -> "Dual":
        return cls(value, seed)

    @property
    def d0(self):
        return self._d0

    @property
    def d1(self):
        return self._d1

    def with_seed(self, seed) -> "Dual":
        """Same value, derivative component set to `seed`."""
        return Dual(self._d0, seed)

    def __repr__(self):
        return f"Dual({self._d0!r}, {self._d1!r})"

    # ----- chain rule -----
    def apply_unary(self, rule: UnaryRule) -> "Dual":
        x0 = self._d0
        return Dual(rule.f(x0), rule.df(x0) * self._d1)

    @classmethod
    def apply_binary(cls, rule: BinaryRule, x, y) -> "Dual":
        if not isinstance(x, Dual):
            return y.apply_unary(partial_rule(rule, x, constant_first=True))
        if not isinstance(y, Dual):
            return x.apply_unary(partial_rule(rule, y, constant_first=False))
        a, b = x._d0, y._d0
        return Dual(rule.f(a, b), rule.fx(a, b) * x._d1 + rule.fy(a, b) * y._d1)

    # ----- arithmetic -----
    def __add__(a, b):
        if isinstance(b, Dual):
            return Dual(a._d0 + b._d0, a._d1 + b._d1)
        if _is_plain(b):
            return Dual(a._d0 + b, a._d1)
        return NotImplemented
    __radd__ = __add__

    def __sub__(a, b):
        if isinstance(b, Dual):
            return Dual(a._d0 - b._d0, a._d1 - b._d1)
        if _is_plain(b):
            return Dual(a._d0 - b, a._d1)
        return NotImplemented

    def __rsub__(b, a):
        if _is_plain(a):
            return Dual(a - b._d0, -b._d1)
        return NotImplemented

    def __mul__(a, b):
        if isinstance(b, Dual):
            return Dual(a._d0 * b._d0, a._d1 * b._d0 + a._d0 * b._d1)
        if _is_plain(b):
            return Dual(a._d0 * b, a._d1 * b)
        return NotImplemented
    __rmul__ = __mul__

    def __truediv__(a, b):
        if isinstance(b, Dual):
            return Dual(a._d0 / b._d0,
                        (a._d1 * b._d0 - a._d0 * b._d1) / (b._d0 * b._d0))
        if _is_plain(b):
            return Dual(a._d0 / np.float64(b), a._d1 / np.float64(b))
        return NotImplemented

    def __rtruediv__(b, a):
        if _is_plain(a):
            return Dual(a / b._d0, -a * b._d1 / (b._d0 * b._d0))
        return NotImplemented

    def __neg__(a):
        return Dual(-a._d0, -a._d1)

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

    # ----- comparison: ordering by value, equality by both components -----
    def __eq__(a, b):
        if not isinstance(b, Dual):
            return NotImplemented
        return a._d0 == b._d0 and a._d1 == b._d1

    def __hash__(self):
        return hash((float(self._d0), float(self._d1)))

    def __lt__(a, b):
        return a._d0 < _value(b)

    def __le__(a, b):
        return a._d0 <= _value(b)

    def __gt__(a, b):
        return a._d0 > _value(b)

    def __ge__(a, b):
        return a._d0 >= _value(b)


def _value(x):
    return x.d0 if isinstance(x, Dual) else x
