# manifold_ad/ad/ops/transcendental.py
from ...scalar import binary_rule, unary_rule
from .arithmetic import _binary, _unary

# ----- Exponential -----
def exp(x):   return _unary(x, unary_rule("exp"))
def exp2(x):  return _unary(x, unary_rule("exp2"))
def exp10(x): return _unary(x, unary_rule("exp10"))


# ----- Logarithmic -----
def ln(x):    return _unary(x, unary_rule("ln"))
def log2(x):  return _unary(x, unary_rule("log2"))
def log10(x): return _unary(x, unary_rule("log10"))


def log(x, base=None):
    """Natural logarithm, or the logarithm of x in `base` when one is given."""
    if base is None:
        return ln(x)
    return _binary(x, base, binary_rule("log"))


# ----- Roots -----
def sqrt(x): return _unary(x, unary_rule("sqrt"))
def cbrt(x): return _unary(x, unary_rule("cbrt"))


def root(x, n):
    """n-th root x ** (1/n)."""
    return _binary(x, n, binary_rule("root"))


# ----- Trigonometric -----
def sin(x):  return _unary(x, unary_rule("sin"))
def cos(x):  return _unary(x, unary_rule("cos"))
def tan(x):  return _unary(x, unary_rule("tan"))
def asin(x): return _unary(x, unary_rule("asin"))
def acos(x): return _unary(x, unary_rule("acos"))
def atan(x): return _unary(x, unary_rule("atan"))


def atan2(y, x):
    """Angle of the point (x, y); the ordinate comes first."""
    return _binary(y, x, binary_rule("atan2"))


# ----- Hyperbolic -----
def sinh(x):  return _unary(x, unary_rule("sinh"))
def cosh(x):  return _unary(x, unary_rule("cosh"))
def tanh(x):  return _unary(x, unary_rule("tanh"))
def asinh(x): return _unary(x, unary_rule("asinh"))
def acosh(x): return _unary(x, unary_rule("acosh"))
def atanh(x): return _unary(x, unary_rule("atanh"))
