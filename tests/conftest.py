"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from pydense import DenseMatrix


class RecordingKernel:
    """
    Kernel test double.

    Records every routine call (name, config, operand views, extras) and
    returns a canned status without touching the operands.
    """

    def __init__(self, status: int = 0, provides=None):
        self.status = status
        self.provides = provides
        self.calls = []

    @property
    def name(self) -> str:
        return 'recording'

    def get_routine(self, routine):
        if self.provides is not None and routine not in self.provides:
            return None

        def record(config, *args):
            self.calls.append((routine, config, args))
            return self.status
        return record

    @property
    def last_config(self):
        return self.calls[-1][1]


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def recorder():
    """Kernel that records calls and reports success."""
    return RecordingKernel()


@pytest.fixture
def real_matrix(rng):
    """Factory for random real DenseMatrix operands."""
    def make(rows, cols):
        return DenseMatrix.from_array(rng.standard_normal((rows, cols)))
    return make


@pytest.fixture
def complex_matrix(rng):
    """Factory for random complex DenseMatrix operands."""
    def make(rows, cols):
        values = rng.standard_normal((rows, cols)) + 1j * rng.standard_normal((rows, cols))
        return DenseMatrix.from_array(values)
    return make


@pytest.fixture
def make_recorder():
    """Factory for recording kernels with a chosen status."""
    return RecordingKernel
