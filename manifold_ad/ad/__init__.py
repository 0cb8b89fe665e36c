# manifold_ad/ad/__init__.py
# Automatic differentiation: reverse-mode tapes and forward-mode numbers

from .core.var import Variable
from .core.tape import GradientTape
from .core.hessian_tape import HessianTape
from .core import seeds
from .dual import Dual
from .hyperdual import HyperDual
from . import ops, forward, bumping

__all__ = [
    # Reverse mode
    'Variable',
    'GradientTape',
    'HessianTape',
    'seeds',
    # Forward mode
    'Dual',
    'HyperDual',
    'forward',
    # Operations and checks
    'ops',
    'bumping',
]
