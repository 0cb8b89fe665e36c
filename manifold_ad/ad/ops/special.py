# manifold_ad/ad/ops/special.py
from ...scalar import unary_rule
from .arithmetic import _unary


def erf(x):
    """
    Error function (scipy.special.erf).
      d/dx erf(x) = (2/√π) * exp(-x²)
    """
    return _unary(x, unary_rule("erf"))


def norm_cdf(x):
    """
    Standard normal CDF Φ(x) = 0.5 * (1 + erf(x / √2)).
      d/dx Φ(x) = φ(x) = exp(-x²/2) / √(2π)
    """
    return _unary(x, unary_rule("norm_cdf"))
