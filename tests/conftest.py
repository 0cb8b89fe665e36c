"""Pytest configuration and fixtures."""

import pytest

from manifold_ad import GradientTape, HessianTape, config
from ad_functions import FUNCTIONS


@pytest.fixture
def tape():
    """Fresh gradient tape."""
    return GradientTape()


@pytest.fixture
def hessian_tape():
    """Fresh Hessian tape."""
    return HessianTape()


@pytest.fixture(autouse=True)
def restore_config():
    """Tests may tweak the shared configuration; put it back afterwards."""
    saved = (config.validate_variables, config.log_node_limit,
             config.fd_step, config.zero_tolerance)
    yield config
    (config.validate_variables, config.log_node_limit,
     config.fd_step, config.zero_tolerance) = saved


@pytest.fixture(params=sorted(FUNCTIONS))
def function_case(request):
    """Parametrizes over the test functions; yields (f, point)."""
    return FUNCTIONS[request.param]
