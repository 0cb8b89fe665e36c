# manifold_ad/ad/core/var.py
from __future__ import annotations
import numpy as np
from typing import Any, Optional

UNTRACKED = -1


class Variable:
    """
    Handle returned by a tape for every leaf and every recorded operation.

    Attributes
    ----------
    value : np.float64
        Primal value.
    index : int
        Position of the producing node on the tape, or UNTRACKED (-1) when the
        value was computed while tracking was suspended or from constants only.
    tape : GradientTape | None
        Tape that produced the handle.
    generation : int
        Tape generation at creation; a reset tape rejects older handles.

    Variables are immutable; arithmetic returns new handles.
    """

    __slots__ = ("_value", "_index", "_tape", "_generation")

    __array_ufunc__ = None  # NumPy scalars defer to the reflected operators

    def __init__(self, value: Any, index: int = UNTRACKED, tape=None, generation: int = 0):
        if not isinstance(value, (int, float, np.number)):
            raise TypeError(f"Variable only accepts real scalars, but got {type(value)}")
        self._value = np.float64(value)
        self._index = int(index)
        self._tape = tape
        self._generation = generation

    @property
    def value(self) -> np.float64:
        return self._value

    @property
    def index(self) -> int:
        return self._index

    @property
    def tape(self):
        return self._tape

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def is_tracked(self) -> bool:
        return self._index != UNTRACKED

    def __repr__(self):
        return f"Variable({self._value!r}, index={self._index})"

    def __float__(self):
        return float(self._value)

    # Equality is identity of the recorded quantity; ordering uses the value
    def __eq__(self, other):
        if not isinstance(other, Variable):
            return NotImplemented
        return (self._tape is other._tape and self._index == other._index
                and self._value == other._value)

    def __hash__(self):
        return hash((id(self._tape), self._index, float(self._value)))

    def __lt__(self, other):
        return self._value < _plain(other)

    def __le__(self, other):
        return self._value <= _plain(other)

    def __gt__(self, other):
        return self._value > _plain(other)

    def __ge__(self, other):
        return self._value >= _plain(other)

    # Operator overloading for arithmetic operations
    def __add__(self, other):
        from ..ops.arithmetic import add
        return add(self, other)

    def __radd__(self, other):
        from ..ops.arithmetic import add
        return add(other, self)

    def __sub__(self, other):
        from ..ops.arithmetic import sub
        return sub(self, other)

    def __rsub__(self, other):
        from ..ops.arithmetic import sub
        return sub(other, self)

    def __mul__(self, other):
        from ..ops.arithmetic import mul
        return mul(self, other)

    def __rmul__(self, other):
        from ..ops.arithmetic import mul
        return mul(other, self)

    def __truediv__(self, other):
        from ..ops.arithmetic import div
        return div(self, other)

    def __rtruediv__(self, other):
        from ..ops.arithmetic import div
        return div(other, self)

    def __mod__(self, other):
        from ..ops.arithmetic import mod
        return mod(self, other)

    def __rmod__(self, other):
        from ..ops.arithmetic import mod
        return mod(other, self)

    def __neg__(self):
        from ..ops.arithmetic import neg
        return neg(self)

    def __pos__(self):
        return self

    def __pow__(self, other):
        from ..ops.arithmetic import pow
        return pow(self, other)

    def __rpow__(self, other):
        from ..ops.arithmetic import pow
        return pow(other, self)


def _plain(x: Any) -> Any:
    return x.value if isinstance(x, Variable) else x


def value(x: Any) -> Any:
    """Return the numeric value of a Variable; pass through anything else unchanged."""
    return x.value if isinstance(x, Variable) else x
