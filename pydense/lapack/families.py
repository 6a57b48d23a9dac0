"""
LAPACK operation families.

gesv solves A * X = B for a general square A by LU factorization with
partial pivoting:

    family   A        B
    gesv     n x n    n x nrhs
"""

from typing import Mapping

from pydense.core.matrix import DenseMatrix
from pydense.core.options import OptionSet
from pydense.core.pipeline import Dimensions, Family, OperandRule
from pydense.core.validation import check_square


def _derive_gesv(operands: Mapping[str, DenseMatrix], options: OptionSet) -> Dimensions:
    A, B = operands['A'], operands['B']

    n = options['n']
    if n < 0:
        n = A.rows
        check_square(A.rows, A.cols, n, 'gesv: A')
    nrhs = options['nrhs']
    if nrhs < 0:
        nrhs = B.cols
    return {'n': n, 'nrhs': nrhs}


def _square(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['n'], d['n'])


def _right_hand_sides(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['n'], d['nrhs'])


GESV = Family(
    name='gesv',
    operands=(OperandRule('A', _square), OperandRule('B', _right_hand_sides)),
    dimensions=('n', 'nrhs'),
    modes=(),
    derive=_derive_gesv,
    noop_when_zero=('n', 'nrhs'),
    routines={'real': 'dgesv', 'complex': 'zgesv'},
    singular_status=True,
)
