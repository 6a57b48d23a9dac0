"""
CPU reference kernel for level-3 BLAS.

Routes every routine to the matching wrapper in scipy.linalg.blas, which
calls the BLAS library SciPy was built against. This is the reference
kernel the other kernels are validated against.

SciPy's wrappers take 2-D arrays rather than pointer/stride pairs, so each
operand is exposed as a strided view of the caller's buffer; results are
assigned back through the same view.
"""

from functools import partial
from typing import Any, Callable

import numpy as np
from numpy.typing import NDArray
from scipy.linalg import blas as scipy_blas

from pydense.core.exceptions import ConfigurationError
from pydense.core.pipeline import ResolvedConfig
from pydense.core.protocols import StridedOperand

_TRANS_CODE = {'N': 0, 'T': 1, 'C': 2}


def _block(rows: int, cols: int, trans: str) -> tuple[int, int]:
    """Stored shape of an operand whose op() is rows x cols."""
    return (cols, rows) if trans != 'N' else (rows, cols)


def _lower(config: ResolvedConfig) -> int:
    return int(config.uplo == 'L')


def _right(config: ResolvedConfig) -> int:
    return int(config.side == 'R')


def scale(C: NDArray[Any], beta: float | complex) -> None:
    """C := beta * C in place; beta == 0 clears C without reading it."""
    if beta == 0:
        C[...] = 0
    else:
        C *= beta


def scale_triangle(C: NDArray[Any], beta: float | complex, uplo: str, hermitian: bool) -> None:
    """
    C := beta * C on the uplo triangle only.

    For Hermitian updates the imaginary part of the diagonal is cleared,
    as zherk/zher2k do.
    """
    n = C.shape[0]
    ones = np.ones((n, n), dtype=bool)
    mask = np.tril(ones) if uplo == 'L' else np.triu(ones)
    if beta == 0:
        C[mask] = 0
    else:
        C[mask] *= beta
    if hermitian:
        idx = np.arange(n)
        C[idx, idx] = C[idx, idx].real


def _gemm(fn: Callable, config: ResolvedConfig,
          a: StridedOperand, b: StridedOperand, c: StridedOperand) -> int:
    m, n, k = config.m, config.n, config.k
    C = c.matrix(m, n)
    if k == 0:
        scale(C, config.beta)
        return 0
    A = a.matrix(*_block(m, k, config.transA))
    B = b.matrix(*_block(k, n, config.transB))
    C[...] = fn(config.alpha, A, B, beta=config.beta, c=C,
                trans_a=_TRANS_CODE[config.transA], trans_b=_TRANS_CODE[config.transB])
    return 0


def _symm(fn: Callable, config: ResolvedConfig,
          a: StridedOperand, b: StridedOperand, c: StridedOperand) -> int:
    m, n = config.m, config.n
    order = m if config.side == 'L' else n
    A = a.matrix(order, order)
    B = b.matrix(m, n)
    C = c.matrix(m, n)
    C[...] = fn(config.alpha, A, B, beta=config.beta, c=C,
                side=_right(config), lower=_lower(config))
    return 0


def _syrk(fn: Callable, config: ResolvedConfig,
          a: StridedOperand, c: StridedOperand, *, hermitian: bool) -> int:
    n, k = config.n, config.k
    C = c.matrix(n, n)
    if k == 0:
        scale_triangle(C, config.beta, config.uplo, hermitian)
        return 0
    A = a.matrix(*_block(n, k, config.trans))
    C[...] = fn(config.alpha, A, beta=config.beta, c=C,
                trans=_TRANS_CODE[config.trans], lower=_lower(config))
    return 0


def _syr2k(fn: Callable, config: ResolvedConfig,
           a: StridedOperand, b: StridedOperand, c: StridedOperand, *, hermitian: bool) -> int:
    n, k = config.n, config.k
    C = c.matrix(n, n)
    if k == 0:
        scale_triangle(C, config.beta, config.uplo, hermitian)
        return 0
    A = a.matrix(*_block(n, k, config.trans))
    B = b.matrix(*_block(n, k, config.trans))
    C[...] = fn(config.alpha, A, B, beta=config.beta, c=C,
                trans=_TRANS_CODE[config.trans], lower=_lower(config))
    return 0


def _triangular(fn: Callable, config: ResolvedConfig,
                a: StridedOperand, b: StridedOperand) -> int:
    m, n = config.m, config.n
    order = m if config.side == 'L' else n
    A = a.matrix(order, order)
    B = b.matrix(m, n)
    B[...] = fn(config.alpha, A, B, side=_right(config), lower=_lower(config),
                trans_a=_TRANS_CODE[config.transA], diag=int(config.diag == 'U'))
    return 0


# routine name without its domain prefix -> implementation
_ROUTINES: dict[str, Callable[..., int]] = {
    'gemm': _gemm,
    'symm': _symm,
    'hemm': _symm,
    'syrk': partial(_syrk, hermitian=False),
    'herk': partial(_syrk, hermitian=True),
    'syr2k': partial(_syr2k, hermitian=False),
    'her2k': partial(_syr2k, hermitian=True),
    'trmm': _triangular,
    'trsm': _triangular,
}


class CPUBlasKernel:
    """
    CPU kernel backed by scipy.linalg.blas.

    Implements the Kernel protocol for the d- and z-prefixed level-3
    routines (dgemm, zgemm, dsymm, zsymm, zhemm, dsyrk, zsyrk, zherk,
    dsyr2k, zsyr2k, zher2k, dtrmm, ztrmm, dtrsm, ztrsm).
    """

    @property
    def name(self) -> str:
        return 'cpu_scipy'

    def get_routine(self, routine: str) -> Callable[..., int]:
        impl = _ROUTINES.get(routine[1:])
        fn = getattr(scipy_blas, routine, None)
        if routine[:1] not in ('d', 'z') or impl is None or fn is None:
            raise ConfigurationError(f"kernel {self.name!r} does not provide {routine}")
        return partial(impl, fn)
