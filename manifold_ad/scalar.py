# manifold_ad/scalar.py

#-----------------------------------------------------------------------------
# Numeric scalar abstraction. Every elementary function is written down once
# as (f, f', f'') on plain numbers; the tapes, Dual and HyperDual all read
# their derivatives from these tables.
#-----------------------------------------------------------------------------
from __future__ import annotations
from typing import Any, Callable, Dict, NamedTuple, Protocol, runtime_checkable
import numpy as np
from scipy import special

LN2 = np.log(2.0)
LN10 = np.log(10.0)
SQRT_PI = np.sqrt(np.pi)
SQRT_TWO_PI = np.sqrt(2.0 * np.pi)


@runtime_checkable
class Scalar(Protocol):
    """
    Closed algebraic type the engine is generic over.

    Plain numbers, Dual, HyperDual and Variable all satisfy it: they support
    the four arithmetic operators, negation and ordering against each other
    and against plain numbers.
    """

    def __add__(self, other: Any) -> Any: ...
    def __sub__(self, other: Any) -> Any: ...
    def __mul__(self, other: Any) -> Any: ...
    def __truediv__(self, other: Any) -> Any: ...
    def __neg__(self) -> Any: ...
    def __lt__(self, other: Any) -> bool: ...


class UnaryRule(NamedTuple):
    """y = f(x) with its first and second derivatives."""
    name: str
    f: Callable[[Any], Any]
    df: Callable[[Any], Any]
    d2f: Callable[[Any], Any]


class BinaryRule(NamedTuple):
    """z = f(x, y) with its gradient and the three distinct Hessian entries."""
    name: str
    f: Callable[[Any, Any], Any]
    fx: Callable[[Any, Any], Any]
    fy: Callable[[Any, Any], Any]
    fxx: Callable[[Any, Any], Any]
    fxy: Callable[[Any, Any], Any]
    fyy: Callable[[Any, Any], Any]


def _zero(*_):
    return 0.0


def _one(*_):
    return 1.0


def _safe_log(x):
    # ln(x) where defined, 0 elsewhere; used by the exponent partials of x**y
    return np.log(x) if np.real(x) > 0 else 0.0


def _norm_pdf(x):
    return np.exp(-0.5 * x * x) / SQRT_TWO_PI


def _sec2(x):
    c = np.cos(x)
    return 1.0 / (c * c)


# ----------------------------- unary rules ----------------------------- #
UNARY_RULES: Dict[str, UnaryRule] = {r.name: r for r in (
    UnaryRule("neg", lambda x: -x, lambda x: -1.0, _zero),
    # Exponential
    UnaryRule("exp", np.exp, np.exp, np.exp),
    UnaryRule("exp2", np.exp2,
              lambda x: LN2 * np.exp2(x),
              lambda x: LN2 * LN2 * np.exp2(x)),
    UnaryRule("exp10", lambda x: np.float_power(10.0, x),
              lambda x: LN10 * np.float_power(10.0, x),
              lambda x: LN10 * LN10 * np.float_power(10.0, x)),
    # Logarithmic
    UnaryRule("ln", np.log, lambda x: 1.0 / x, lambda x: -1.0 / (x * x)),
    UnaryRule("log2", np.log2,
              lambda x: 1.0 / (LN2 * x),
              lambda x: -1.0 / (LN2 * x * x)),
    UnaryRule("log10", np.log10,
              lambda x: 1.0 / (LN10 * x),
              lambda x: -1.0 / (LN10 * x * x)),
    # Roots
    UnaryRule("sqrt", np.sqrt,
              lambda x: 0.5 / np.sqrt(x),
              lambda x: -0.25 / (x * np.sqrt(x))),
    UnaryRule("cbrt", np.cbrt,
              lambda x: 1.0 / (3.0 * np.cbrt(x) ** 2),
              lambda x: -2.0 / (9.0 * x * np.cbrt(x) ** 2)),
    # Trigonometric
    UnaryRule("sin", np.sin, np.cos, lambda x: -np.sin(x)),
    UnaryRule("cos", np.cos, lambda x: -np.sin(x), lambda x: -np.cos(x)),
    UnaryRule("tan", np.tan, _sec2, lambda x: 2.0 * _sec2(x) * np.tan(x)),
    UnaryRule("asin", np.arcsin,
              lambda x: 1.0 / np.sqrt(1.0 - x * x),
              lambda x: x / (1.0 - x * x) ** 1.5),
    UnaryRule("acos", np.arccos,
              lambda x: -1.0 / np.sqrt(1.0 - x * x),
              lambda x: -x / (1.0 - x * x) ** 1.5),
    UnaryRule("atan", np.arctan,
              lambda x: 1.0 / (1.0 + x * x),
              lambda x: -2.0 * x / (1.0 + x * x) ** 2),
    # Hyperbolic
    UnaryRule("sinh", np.sinh, np.cosh, np.sinh),
    UnaryRule("cosh", np.cosh, np.sinh, np.cosh),
    UnaryRule("tanh", np.tanh,
              lambda x: 1.0 - np.tanh(x) ** 2,
              lambda x: -2.0 * np.tanh(x) * (1.0 - np.tanh(x) ** 2)),
    UnaryRule("asinh", np.arcsinh,
              lambda x: 1.0 / np.sqrt(x * x + 1.0),
              lambda x: -x / (x * x + 1.0) ** 1.5),
    UnaryRule("acosh", np.arccosh,
              lambda x: 1.0 / (np.sqrt(x - 1.0) * np.sqrt(x + 1.0)),
              lambda x: -x / ((x - 1.0) * (x + 1.0)) ** 1.5),
    UnaryRule("atanh", np.arctanh,
              lambda x: 1.0 / (1.0 - x * x),
              lambda x: 2.0 * x / (1.0 - x * x) ** 2),
    # Special
    UnaryRule("erf", special.erf,
              lambda x: (2.0 / SQRT_PI) * np.exp(-x * x),
              lambda x: (-4.0 * x / SQRT_PI) * np.exp(-x * x)),
    UnaryRule("norm_cdf", special.ndtr, _norm_pdf, lambda x: -x * _norm_pdf(x)),
)}


# ----------------------------- binary rules ---------------------------- #
def _pow_fy(x, y):
    return np.float_power(x, y) * _safe_log(x)


def _pow_fxy(x, y):
    return np.float_power(x, y - 1.0) * (1.0 + y * _safe_log(x))


def _pow_fyy(x, y):
    lx = _safe_log(x)
    return np.float_power(x, y) * lx * lx


def _scaled_power(coef, x, e):
    # coef * x**e, with a vanishing coefficient winning over a singular power
    if coef == 0:
        return 0.0
    return coef * np.float_power(x, e)


def _root(x, n):
    return np.float_power(x, 1.0 / n)


def _atan2_r2(y, x):
    return x * x + y * y


BINARY_RULES: Dict[str, BinaryRule] = {r.name: r for r in (
    BinaryRule("add", lambda x, y: x + y, _one, _one, _zero, _zero, _zero),
    BinaryRule("sub", lambda x, y: x - y, _one, lambda x, y: -1.0, _zero, _zero, _zero),
    BinaryRule("mul", lambda x, y: x * y, lambda x, y: y, lambda x, y: x,
               _zero, _one, _zero),
    BinaryRule("div", lambda x, y: x / y,
               lambda x, y: 1.0 / y,
               lambda x, y: -x / (y * y),
               _zero,
               lambda x, y: -1.0 / (y * y),
               lambda x, y: 2.0 * x / (y * y * y)),
    BinaryRule("pow", np.float_power,
               lambda x, y: _scaled_power(y, x, y - 1.0),
               _pow_fy,
               lambda x, y: _scaled_power(y * (y - 1.0), x, y - 2.0),
               _pow_fxy,
               _pow_fyy),
    # log_b(x) with the base as the second operand
    BinaryRule("log", lambda x, b: np.log(x) / np.log(b),
               lambda x, b: 1.0 / (x * np.log(b)),
               lambda x, b: -np.log(x) / (b * np.log(b) ** 2),
               lambda x, b: -1.0 / (x * x * np.log(b)),
               lambda x, b: -1.0 / (x * b * np.log(b) ** 2),
               lambda x, b: np.log(x) * (np.log(b) + 2.0) / (b * b * np.log(b) ** 3)),
    # n-th root x**(1/n)
    BinaryRule("root", _root,
               lambda x, n: _root(x, n) / (n * x),
               lambda x, n: -np.log(x) * _root(x, n) / (n * n),
               lambda x, n: _root(x, n) * (1.0 - n) / (n * n * x * x),
               lambda x, n: -_root(x, n) * (np.log(x) + n) / (n ** 3 * x),
               lambda x, n: np.log(x) * _root(x, n) * (np.log(x) + 2.0 * n) / n ** 4),
    # atan2(y, x): the first operand is the ordinate
    BinaryRule("atan2", np.arctan2,
               lambda y, x: x / _atan2_r2(y, x),
               lambda y, x: -y / _atan2_r2(y, x),
               lambda y, x: -2.0 * x * y / _atan2_r2(y, x) ** 2,
               lambda y, x: (y * y - x * x) / _atan2_r2(y, x) ** 2,
               lambda y, x: 2.0 * x * y / _atan2_r2(y, x) ** 2),
    BinaryRule("mod", np.mod, _one, lambda x, y: -np.floor(x / y), _zero, _zero, _zero),
)}


def unary_rule(name: str) -> UnaryRule:
    """Look up a unary rule by name; raises KeyError for unknown names."""
    return UNARY_RULES[name]


def binary_rule(name: str) -> BinaryRule:
    """Look up a binary rule by name; raises KeyError for unknown names."""
    return BINARY_RULES[name]


def constant_power_rule(c) -> UnaryRule:
    """x ** c for a constant exponent c."""
    return UnaryRule(
        "pow",
        lambda x: np.float_power(x, c),
        lambda x: _scaled_power(c, x, c - 1.0),
        lambda x: _scaled_power(c * (c - 1.0), x, c - 2.0),
    )


def constant_base_rule(c) -> UnaryRule:
    """c ** x for a constant base c."""
    lc = _safe_log(c)
    return UnaryRule(
        "pow",
        lambda x: np.float_power(c, x),
        lambda x: lc * np.float_power(c, x),
        lambda x: lc * lc * np.float_power(c, x),
    )


def partial_rule(rule: BinaryRule, c, *, constant_first: bool) -> UnaryRule:
    """
    Freeze one operand of a binary rule to the constant `c`, leaving a unary
    rule in the other operand. Used when a Variable or Dual meets a plain
    number.
    """
    if constant_first:
        return UnaryRule(rule.name,
                         lambda y: rule.f(c, y),
                         lambda y: rule.fy(c, y),
                         lambda y: rule.fyy(c, y))
    return UnaryRule(rule.name,
                     lambda x: rule.f(x, c),
                     lambda x: rule.fx(x, c),
                     lambda x: rule.fxx(x, c))
