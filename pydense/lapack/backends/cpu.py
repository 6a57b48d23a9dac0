"""
CPU reference kernel for the LAPACK general solver.

Routes dgesv/zgesv to scipy.linalg.lapack. SciPy returns the LU factors,
the pivot indices (already 0-based) and the solution as new arrays; they
are written back through strided views of the caller's buffers.
"""

from functools import partial
from typing import Any, Callable

from numpy.typing import NDArray
from scipy.linalg import lapack as scipy_lapack

from pydense.core.exceptions import ConfigurationError
from pydense.core.pipeline import ResolvedConfig
from pydense.core.protocols import StridedOperand

ROUTINES = ('dgesv', 'zgesv')


def _gesv(fn: Callable, config: ResolvedConfig,
          a: StridedOperand, b: StridedOperand, ipiv: NDArray[Any]) -> int:
    n, nrhs = config.n, config.nrhs
    A = a.matrix(n, n)
    B = b.matrix(n, nrhs)
    lu, piv, x, info = fn(A, B)
    if info < 0:
        return int(info)
    # the factorization is complete even when U is singular
    A[...] = lu
    ipiv[:n] = piv
    if info == 0:
        B[...] = x
    return int(info)


class CPULapackKernel:
    """
    CPU kernel backed by scipy.linalg.lapack.

    Provides dgesv and zgesv. A positive status k means U[k-1, k-1] is
    exactly zero; A and the pivots then hold the factorization and B is
    left unchanged.
    """

    @property
    def name(self) -> str:
        return 'cpu_scipy'

    def get_routine(self, routine: str) -> Callable[..., int]:
        if routine not in ROUTINES:
            raise ConfigurationError(f"kernel {self.name!r} does not provide {routine}")
        return partial(_gesv, getattr(scipy_lapack, routine))
