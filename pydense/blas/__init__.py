"""
Level-3 BLAS: matrix-matrix operations.

Public API:
    gemm(A, B, C, alpha, beta, ...)
    symm(A, B, C, alpha, beta, ...)  /  hemm(...)
    syrk(A, C, alpha, beta, ...)     /  herk(...)
    syr2k(A, B, C, alpha, beta, ...) /  her2k(...)
    trmm(A, B, alpha, ...)
    trsm(A, B, alpha, ...)

Each entry point updates its output operand in place and returns a
Result describing the resolved call.

Example:
    >>> from pydense import DenseMatrix
    >>> from pydense.blas import gemm
    >>> A = DenseMatrix.from_array([[1.0, 2.0], [3.0, 4.0]])
    >>> C = DenseMatrix.zeros(2, 2)
    >>> result = gemm(A, A, C, alpha=2.0)
    >>> result.info['routine']
    'dgemm'
"""

from pydense.blas.families import FAMILIES
from pydense.blas.solvers import (
    gemm,
    hemm,
    her2k,
    herk,
    symm,
    syr2k,
    syrk,
    trmm,
    trsm,
)

__all__ = [
    "gemm",
    "symm",
    "hemm",
    "syrk",
    "herk",
    "syr2k",
    "her2k",
    "trmm",
    "trsm",
    "FAMILIES",
]
