"""
Level-3 BLAS operation families.

Each family states how its dimensions default from the operand shapes and
which stored block of each operand its kernel touches. The touched block
(rows, cols) gives both bounds checks: the stride must be at least
max(1, rows) and the buffer must hold offset + (cols - 1) * ld + rows
elements.

    family        A                     B                     C
    gemm          m x k  (k x m if T)   k x n  (n x k if T)   m x n
    symm, hemm    m x m  (n x n if R)   m x n                 m x n
    syrk, herk    n x k  (k x n if T)   -                     n x n
    syr2k, her2k  n x k  (k x n if T)   as A                  n x n
    trmm, trsm    m x m  (n x n if R)   m x n                 -

For the side-parameterized families the dimension on A's side defaults
from A and the other one from B, so B and C may be larger than the block
the call works on.
"""

from typing import Mapping

from pydense.core.matrix import DenseMatrix
from pydense.core.options import OptionSet
from pydense.core.pipeline import Dimensions, Family, OperandRule
from pydense.core.scalars import ALPHA, BETA, ScalarRule
from pydense.core.validation import check_matching, check_square

REAL_ALPHA = ScalarRule('alpha', 'one', real_only=True)
REAL_BETA = ScalarRule('beta', 'zero', real_only=True)


def _given(options: OptionSet, name: str) -> int | None:
    """Explicit dimension, or None when the sentinel asks for the default."""
    value = options[name]
    return None if value < 0 else value


def _transposed(options: OptionSet, name: str) -> bool:
    return options[name] != 'N'


# === Dimension derivation ===

def _derive_gemm(operands: Mapping[str, DenseMatrix], options: OptionSet) -> Dimensions:
    A, B = operands['A'], operands['B']
    trans_a = _transposed(options, 'transA')
    trans_b = _transposed(options, 'transB')

    m = _given(options, 'm')
    if m is None:
        m = A.cols if trans_a else A.rows
    n = _given(options, 'n')
    if n is None:
        n = B.rows if trans_b else B.cols
    k = _given(options, 'k')
    if k is None:
        k = A.rows if trans_a else A.cols
        k_from_b = B.cols if trans_b else B.rows
        check_matching(k, k_from_b, 'gemm: k derived from A', 'k derived from B')
    return {'m': m, 'n': n, 'k': k}


def _side_derivation(name: str):
    """The dimension on A's side from a square A, the other one from B."""
    def derive(operands: Mapping[str, DenseMatrix], options: OptionSet) -> Dimensions:
        A, B = operands['A'], operands['B']
        side = options['side']

        m = _given(options, 'm')
        if m is None:
            if side == 'L':
                check_square(A.rows, A.cols, None, f"{name}: A")
                m = A.rows
            else:
                m = B.rows
        n = _given(options, 'n')
        if n is None:
            if side == 'R':
                check_square(A.rows, A.cols, None, f"{name}: A")
                n = A.rows
            else:
                n = B.cols
        return {'m': m, 'n': n}
    return derive


def _rank_derivation(name: str, two_operands: bool):
    """n, k from A (swapped under transpose); B must agree for rank-2k."""
    def derive(operands: Mapping[str, DenseMatrix], options: OptionSet) -> Dimensions:
        A = operands['A']
        trans = _transposed(options, 'trans')
        B = operands['B'] if two_operands else None

        n = _given(options, 'n')
        if n is None:
            n = A.cols if trans else A.rows
            if B is not None:
                check_matching(n, B.cols if trans else B.rows,
                               f"{name}: n derived from A", 'n derived from B')
        k = _given(options, 'k')
        if k is None:
            k = A.rows if trans else A.cols
            if B is not None:
                check_matching(k, B.rows if trans else B.cols,
                               f"{name}: k derived from A", 'k derived from B')
        return {'n': n, 'k': k}
    return derive


# === Touched blocks ===

def _gemm_a(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['k'], d['m']) if _transposed(o, 'transA') else (d['m'], d['k'])


def _gemm_b(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['n'], d['k']) if _transposed(o, 'transB') else (d['k'], d['n'])


def _m_by_n(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['m'], d['n'])


def _side_square(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    order = d['m'] if o['side'] == 'L' else d['n']
    return (order, order)


def _rank_factor(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['k'], d['n']) if _transposed(o, 'trans') else (d['n'], d['k'])


def _n_by_n(d: Mapping[str, int], o: OptionSet) -> tuple[int, int]:
    return (d['n'], d['n'])


# === Families ===

GEMM = Family(
    name='gemm',
    operands=(OperandRule('A', _gemm_a), OperandRule('B', _gemm_b), OperandRule('C', _m_by_n)),
    dimensions=('m', 'n', 'k'),
    modes=('transA', 'transB'),
    derive=_derive_gemm,
    noop_when_zero=('m', 'n'),
    routines={'real': 'dgemm', 'complex': 'zgemm'},
    scalars=(ALPHA, BETA),
)


def _product_family(name: str, complex_routine: str) -> Family:
    return Family(
        name=name,
        operands=(OperandRule('A', _side_square), OperandRule('B', _m_by_n), OperandRule('C', _m_by_n)),
        dimensions=('m', 'n'),
        modes=('side', 'uplo'),
        derive=_side_derivation(name),
        noop_when_zero=('m', 'n'),
        routines={'real': 'dsymm', 'complex': complex_routine},
        scalars=(ALPHA, BETA),
    )


SYMM = _product_family('symm', 'zsymm')
HEMM = _product_family('hemm', 'zhemm')

SYRK = Family(
    name='syrk',
    operands=(OperandRule('A', _rank_factor), OperandRule('C', _n_by_n)),
    dimensions=('n', 'k'),
    modes=('uplo', 'trans'),
    derive=_rank_derivation('syrk', two_operands=False),
    noop_when_zero=('n',),
    routines={'real': 'dsyrk', 'complex': 'zsyrk'},
    scalars=(ALPHA, BETA),
    complex_trans=frozenset({'N', 'T'}),
)

HERK = Family(
    name='herk',
    operands=(OperandRule('A', _rank_factor), OperandRule('C', _n_by_n)),
    dimensions=('n', 'k'),
    modes=('uplo', 'trans'),
    derive=_rank_derivation('herk', two_operands=False),
    noop_when_zero=('n',),
    routines={'real': 'dsyrk', 'complex': 'zherk'},
    scalars=(REAL_ALPHA, REAL_BETA),
    complex_trans=frozenset({'N', 'C'}),
)

SYR2K = Family(
    name='syr2k',
    operands=(OperandRule('A', _rank_factor), OperandRule('B', _rank_factor), OperandRule('C', _n_by_n)),
    dimensions=('n', 'k'),
    modes=('uplo', 'trans'),
    derive=_rank_derivation('syr2k', two_operands=True),
    noop_when_zero=('n',),
    routines={'real': 'dsyr2k', 'complex': 'zsyr2k'},
    scalars=(ALPHA, BETA),
    complex_trans=frozenset({'N', 'T'}),
)

HER2K = Family(
    name='her2k',
    operands=(OperandRule('A', _rank_factor), OperandRule('B', _rank_factor), OperandRule('C', _n_by_n)),
    dimensions=('n', 'k'),
    modes=('uplo', 'trans'),
    derive=_rank_derivation('her2k', two_operands=True),
    noop_when_zero=('n',),
    routines={'real': 'dsyr2k', 'complex': 'zher2k'},
    scalars=(ALPHA, REAL_BETA),
    complex_trans=frozenset({'N', 'C'}),
)


def _triangular_family(name: str) -> Family:
    return Family(
        name=name,
        operands=(OperandRule('A', _side_square), OperandRule('B', _m_by_n)),
        dimensions=('m', 'n'),
        modes=('side', 'uplo', 'transA', 'diag'),
        derive=_side_derivation(name),
        noop_when_zero=('m', 'n'),
        routines={'real': f'd{name}', 'complex': f'z{name}'},
        scalars=(ALPHA,),
    )


TRMM = _triangular_family('trmm')
TRSM = _triangular_family('trsm')

FAMILIES: dict[str, Family] = {
    family.name: family
    for family in (GEMM, SYMM, HEMM, SYRK, HERK, SYR2K, HER2K, TRMM, TRSM)
}
