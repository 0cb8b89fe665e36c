"""
Test functions written once with manifold_ad.ops; they run on Variables,
Duals, HyperDuals and plain numbers alike.
"""

import numpy as np

from manifold_ad.ad import ops


def scenario(x):
    """f(x, y) = x² · y + sin(y)"""
    return x[0] * x[0] * x[1] + ops.sin(x[1])


def mixed(x):
    """exp(x·y) / z + ln(z) · cos(x) - sqrt(x² + y²) + tanh(y·z)"""
    return (ops.exp(x[0] * x[1]) / x[2] + ops.ln(x[2]) * ops.cos(x[0])
            - ops.sqrt(x[0] * x[0] + x[1] * x[1]) + ops.tanh(x[1] * x[2]))


def rosenbrock(x):
    return (1.0 - x[0]) ** 2 + 100.0 * (x[1] - x[0] ** 2) ** 2


def powers(x):
    """x^y + atan2(y, x) + erf(x·y) - y³ / x"""
    return x[0] ** x[1] + ops.atan2(x[1], x[0]) + ops.erf(x[0] * x[1]) - x[1] ** 3 / x[0]


# name -> (function, point)
FUNCTIONS = {
    "scenario": (scenario, np.array([2.0, 0.0])),
    "mixed": (mixed, np.array([0.7, -0.4, 1.3])),
    "rosenbrock": (rosenbrock, np.array([-1.2, 1.0])),
    "powers": (powers, np.array([1.5, 0.8])),
}


def on_tape(f):
    """Adapt f(x) to the f(tape, x) calling convention of the tape helpers."""
    return lambda tape, x: f(x)


def plain(f):
    """Adapt f(x) to a plain-number function of an ndarray."""
    return lambda x: float(f(tuple(x)))
