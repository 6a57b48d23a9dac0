"""
LAPACK: dense linear system solver.

Public API:
    gesv(A, B, ipiv=None, ...) -> Result

Example:
    >>> from pydense import DenseMatrix
    >>> from pydense.lapack import gesv
    >>> A = DenseMatrix.from_array([[2.0, 1.0], [1.0, 1.0]])
    >>> B = DenseMatrix.from_array([3.0, 2.0])
    >>> gesv(A, B).info['routine']
    'dgesv'
"""

from pydense.lapack.families import GESV
from pydense.lapack.solvers import gesv

__all__ = [
    "gesv",
    "GESV",
]
