from .arithmetic import add, sub, mul, div, neg, pow, mod
from .transcendental import (
    exp, exp2, exp10, ln, log, log2, log10, sqrt, cbrt, root,
    sin, cos, tan, asin, acos, atan, atan2,
    sinh, cosh, tanh, asinh, acosh, atanh,
)
from .special import erf, norm_cdf
from .custom import custom_operation, custom_binary_operation

__all__ = [
    "add", "sub", "mul", "div", "neg", "pow", "mod",
    "exp", "exp2", "exp10", "ln", "log", "log2", "log10", "sqrt", "cbrt", "root",
    "sin", "cos", "tan", "asin", "acos", "atan", "atan2",
    "sinh", "cosh", "tanh", "asinh", "acosh", "atanh",
    "erf", "norm_cdf",
    "custom_operation", "custom_binary_operation",
]
