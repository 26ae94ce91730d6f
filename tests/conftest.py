import numpy as np
import pytest


@pytest.fixture
def small_problem():
    """The 5x5 problem with two active constraints at the optimum."""
    A = np.array([
        [-0.24, -0.82, 1.35, 0.36, 0.35],
        [-0.53, -0.20, -0.76, 0.98, -0.54],
        [0.22, 1.25, -1.60, -1.37, -1.94],
        [-0.51, -0.56, -0.08, 0.96, 0.46],
        [0.48, -2.25, 0.38, 0.06, -1.29],
    ])
    b = np.array([-1.6, 0.19, 0.17, 0.31, -1.27])
    x = np.array([2.201, 1.190, 0.0, 1.550, 0.0])
    return A, b, x


@pytest.fixture
def random_problem():
    rng = np.random.RandomState(0)
    A = rng.randn(40, 15)
    b = rng.randn(40)
    return A, b


@pytest.fixture
def random_multi_problem():
    rng = np.random.RandomState(1)
    A = rng.randn(60, 12)
    B = rng.randn(60, 5)
    return A, B
