# manifold_ad/ad/ops/custom.py
"""
User-defined primitives with hand-written derivatives.

The first derivatives are required. The second derivatives are only needed
by a Hessian tape and by HyperDual numbers; leaving them out makes those
modes raise AutoDiffError when the operation is evaluated.
"""
from typing import Callable, Optional

from ...errors import AutoDiffError
from ...scalar import BinaryRule, UnaryRule
from .arithmetic import _binary, _unary


def _missing_second(name: str):
    def fail(*_):
        raise AutoDiffError(f"custom operation '{name}' has no second derivative")
    return fail


def custom_operation(x, f: Callable, df: Callable, d2f: Optional[Callable] = None,
                     *, name: str = "custom"):
    """
    Apply y = f(x) with derivative df and, optionally, second derivative d2f.

    Example
    -------
    from scipy.special import expit
    softplus = lambda v: custom_operation(
        v, lambda t: np.log1p(np.exp(t)), expit, lambda t: expit(t) * (1 - expit(t)))
    """
    rule = UnaryRule(name, f, df, d2f or _missing_second(name))
    return _unary(x, rule)


def custom_binary_operation(x, y, f: Callable, fx: Callable, fy: Callable,
                            fxx: Optional[Callable] = None,
                            fxy: Optional[Callable] = None,
                            fyy: Optional[Callable] = None,
                            *, name: str = "custom"):
    """Apply z = f(x, y) with partials fx, fy and, optionally, fxx, fxy, fyy."""
    missing = _missing_second(name)
    rule = BinaryRule(name, f, fx, fy, fxx or missing, fxy or missing, fyy or missing)
    return _binary(x, y, rule)
