# manifold_ad/__init__.py
# Automatic differentiation for small manifold problems

from .config import AutoDiffConfig, config
from .errors import AutoDiffError, ForeignVariableError, SeedDimensionError
from .scalar import Scalar
from .ad import (
    Variable, GradientTape, HessianTape, Dual, HyperDual,
    ops, forward, seeds, bumping,
)
from .linalg import inverse, determinant, nam, is_nam
from .geometry import MetricTensorField, christoffel_first_kind, christoffel_second_kind

__version__ = "0.1.0"

__all__ = [
    # Configuration and errors
    'AutoDiffConfig', 'config',
    'AutoDiffError', 'ForeignVariableError', 'SeedDimensionError',
    # Engine
    'Scalar',
    'Variable', 'GradientTape', 'HessianTape',
    'Dual', 'HyperDual',
    'ops', 'forward', 'seeds', 'bumping',
    # Linear algebra
    'inverse', 'determinant', 'nam', 'is_nam',
    # Geometry
    'MetricTensorField', 'christoffel_first_kind', 'christoffel_second_kind',
]
