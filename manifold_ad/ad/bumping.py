"""
Central finite differences ("bumping").

Pure finite-difference reference used to check the AD modes:

Formulas:
    ∂f/∂xᵢ     = [f(x+εeᵢ) - f(x-εeᵢ)] / (2ε)
    ∂²f/∂xᵢ²   = [f(x+εeᵢ) - 2f(x) + f(x-εeᵢ)] / ε²
    ∂²f/∂xᵢ∂xⱼ = [f(x+εeᵢ+εeⱼ) - f(x+εeᵢ-εeⱼ) - f(x-εeᵢ+εeⱼ) + f(x-εeᵢ-εeⱼ)] / (4ε²)

Evaluations: 2n for the gradient, 1 + 2n + 4·n(n-1)/2 for the Hessian.
"""

import numpy as np
from typing import Callable, Optional

from ..config import config


def _point(x) -> np.ndarray:
    x = np.asarray(x, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(f"expected a 1-d point, got shape {x.shape}")
    return x


def central_difference_gradient(f: Callable[[np.ndarray], float], x,
                                step: Optional[float] = None) -> np.ndarray:
    """Gradient of a plain-number function by central differences."""
    x = _point(x)
    eps = config.fd_step if step is None else step
    grad = np.zeros_like(x)
    for i in range(x.shape[0]):
        e = np.zeros_like(x); e[i] = eps
        grad[i] = (f(x + e) - f(x - e)) / (2.0 * eps)
    return grad


def central_difference_hessian(f: Callable[[np.ndarray], float], x,
                               step: Optional[float] = None) -> np.ndarray:
    """Symmetric Hessian of a plain-number function by central differences."""
    x = _point(x)
    eps = config.fd_step if step is None else step
    n = x.shape[0]
    H = np.zeros((n, n))
    f0 = f(x)

    for i in range(n):
        ei = np.zeros(n); ei[i] = eps
        H[i, i] = (f(x + ei) - 2.0 * f0 + f(x - ei)) / (eps * eps)
        for j in range(i + 1, n):
            ej = np.zeros(n); ej[j] = eps
            H[i, j] = H[j, i] = (f(x + ei + ej) - f(x + ei - ej)
                                 - f(x - ei + ej) + f(x - ei - ej)) / (4.0 * eps * eps)
    return H
