# manifold_ad/ad/ops/arithmetic.py
"""
Generic primitives. Each one dispatches on its operands:
  - a Variable records on the tape that created it
  - a Dual / HyperDual propagates its derivative components
  - plain numbers are evaluated directly
so the same user function runs in reverse mode, forward mode and plain
evaluation.
"""
import numpy as np

from ...scalar import (
    BinaryRule, UnaryRule, binary_rule, constant_base_rule, constant_power_rule, unary_rule,
)
from ..core.var import Variable
from ..dual import Dual
from ..hyperdual import HyperDual

_FORWARD_TYPES = (Dual, HyperDual)


def _is_plain(x) -> bool:
    return isinstance(x, (int, float, np.number))


def _forward_type(*args):
    kinds = {type(a) for a in args if isinstance(a, _FORWARD_TYPES)}
    if len(kinds) > 1:
        raise TypeError("cannot mix Dual and HyperDual operands")
    return kinds.pop() if kinds else None


def _unary(x, rule: UnaryRule):
    """Apply a unary rule to any supported scalar."""
    if isinstance(x, Variable):
        if x.tape is None:
            return Variable(rule.f(x.value))
        return x.tape.apply_unary(rule, x)
    if isinstance(x, _FORWARD_TYPES):
        return x.apply_unary(rule)
    if not _is_plain(x):
        raise TypeError(f"unsupported operand type for {rule.name}: {type(x).__name__}")
    return rule.f(x)


def _binary(x, y, rule: BinaryRule):
    """Apply a binary rule to any supported pair of scalars."""
    kind = _forward_type(x, y)
    x_var, y_var = isinstance(x, Variable), isinstance(y, Variable)
    if x_var or y_var:
        if kind is not None:
            raise TypeError(f"cannot mix Variable and {kind.__name__} operands")
        tape = x.tape if x_var and x.tape is not None else (y.tape if y_var else None)
        if tape is not None:
            return tape.apply_binary(rule, x, y)
        xv = x.value if x_var else x
        yv = y.value if y_var else y
        return Variable(rule.f(xv, yv))
    if kind is not None:
        return kind.apply_binary(rule, x, y)
    for v in (x, y):
        if not _is_plain(v):
            raise TypeError(f"unsupported operand type for {rule.name}: {type(v).__name__}")
    return rule.f(x, y)


_ADD = binary_rule("add")
_SUB = binary_rule("sub")
_MUL = binary_rule("mul")
_DIV = binary_rule("div")
_POW = binary_rule("pow")
_MOD = binary_rule("mod")
_NEG = unary_rule("neg")


def add(x, y): return _binary(x, y, _ADD)
def sub(x, y): return _binary(x, y, _SUB)
def mul(x, y): return _binary(x, y, _MUL)
def div(x, y): return _binary(x, y, _DIV)


def neg(x):
    return _unary(x, _NEG)


def mod(x, y):
    """
    Floored remainder x - y * floor(x / y).
    ∂/∂x = 1, ∂/∂y = -floor(x / y).
    """
    return _binary(x, y, _MOD)


def pow(x, y):
    """
    Power x ** y.

    A plain-number exponent (or base) records a unary node. With both
    operands live:
      ∂out/∂x = y * x^(y-1)
      ∂out/∂y = x^y * log(x)        (taken as 0 where x <= 0)
    """
    if _is_plain(y) and not _is_plain(x):
        return _unary(x, constant_power_rule(y))
    if _is_plain(x) and not _is_plain(y):
        return _unary(y, constant_base_rule(x))
    return _binary(x, y, _POW)
