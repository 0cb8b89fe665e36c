# manifold_ad/ad/core/__init__.py

"""
Reverse-mode core.

Exports:
    Variable      : value + tape-index handle returned by every tape operation.
    GradientTape  : records operations; reverse_accumulate gives the gradient.
    HessianTape   : also records second-order partials; gives the Hessian.
    GradientNode, HessianNode : tape entries.
    reverse_sweep : single reverse pass over a node log.
    grad, value   : convenience helpers (see seeds for the full set).
"""

from .node import GradientNode, HessianNode
from .var import Variable, UNTRACKED
from .tape import GradientTape
from .hessian_tape import HessianTape
from .engine import reverse_sweep
from .seeds import grad, value

__all__ = [
    "GradientNode", "HessianNode",
    "Variable", "UNTRACKED",
    "GradientTape", "HessianTape",
    "reverse_sweep",
    "grad", "value",
]
