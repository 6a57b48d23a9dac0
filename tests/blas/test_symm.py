"""
Tests for symm and hemm on the SciPy reference kernel.

Only the uplo triangle of A may be read: the other triangle is filled
with values that would change the result if it were.
"""

import numpy as np
import pytest

from pydense import DenseMatrix
from pydense.blas import hemm, symm
from pydense.core.compute.tolerances import CPU_FP64
from pydense.core.exceptions import BufferSizeError, DimensionError

TOL = dict(rtol=CPU_FP64.rtol, atol=CPU_FP64.atol)


def _random(rng, shape, complex_=False):
    X = rng.standard_normal(shape)
    if complex_:
        X = X + 1j * rng.standard_normal(shape)
    return X


def _full(a, uplo, hermitian=False):
    """Symmetric/Hermitian matrix defined by the uplo triangle of a."""
    if uplo == 'L':
        stored, strict = np.tril(a), np.tril(a, -1)
    else:
        stored, strict = np.triu(a), np.triu(a, 1)
    full = stored + (strict.conj().T if hermitian else strict.T)
    if hermitian:
        np.fill_diagonal(full, full.diagonal().real)
    return full


class TestSymm:

    @pytest.mark.parametrize("side", ['L', 'R'])
    @pytest.mark.parametrize("uplo", ['L', 'U'])
    def test_real(self, rng, side, uplo):
        m, n = 3, 4
        order = m if side == 'L' else n
        a = _random(rng, (order, order))
        b, c = _random(rng, (m, n)), _random(rng, (m, n))
        C = DenseMatrix.from_array(c)

        result = symm(DenseMatrix.from_array(a), DenseMatrix.from_array(b), C,
                      alpha=2.0, beta=0.5, side=side, uplo=uplo)

        S = _full(a, uplo)
        product = S @ b if side == 'L' else b @ S
        np.testing.assert_allclose(C.to_array(), 2.0 * product + 0.5 * c, **TOL)
        assert result.info['routine'] == 'dsymm'

    def test_complex_symmetric(self, rng):
        a = _random(rng, (3, 3), complex_=True)
        b = _random(rng, (3, 2), complex_=True)
        C = DenseMatrix.zeros(3, 2, dtype='complex')

        result = symm(DenseMatrix.from_array(a), DenseMatrix.from_array(b), C, alpha=1j)

        np.testing.assert_allclose(C.to_array(), 1j * _full(a, 'L') @ b, **TOL)
        assert result.info['routine'] == 'zsymm'

    def test_derived_m_requires_square_a(self, rng):
        A = DenseMatrix.from_array(_random(rng, (3, 2)))
        with pytest.raises(DimensionError, match="square"):
            symm(A, DenseMatrix.zeros(3, 2), DenseMatrix.zeros(3, 2))

    def test_derived_n_on_right_comes_from_a(self, rng):
        A = DenseMatrix.from_array(_random(rng, (3, 3)))
        with pytest.raises(BufferSizeError) as exc_info:
            symm(A, DenseMatrix.zeros(3, 2), DenseMatrix.zeros(3, 2), side='R')
        assert exc_info.value.required == 9

    def test_leading_block_of_taller_b(self, rng):
        a = _random(rng, (2, 2))
        b, c = _random(rng, (3, 2)), _random(rng, (3, 2))
        C = DenseMatrix.from_array(c)

        result = symm(DenseMatrix.from_array(a), DenseMatrix.from_array(b), C, beta=1.0)

        assert (result.params.m, result.params.n) == (2, 2)
        expected = c.copy()
        expected[:2] += _full(a, 'L') @ b[:2]
        np.testing.assert_allclose(C.to_array(), expected, **TOL)

    def test_leading_block_of_wider_b_on_right(self, rng):
        a = _random(rng, (2, 2))
        b, c = _random(rng, (3, 4)), np.zeros((3, 4))
        C = DenseMatrix.from_array(c)

        result = symm(DenseMatrix.from_array(a), DenseMatrix.from_array(b), C,
                      side='R', uplo='U')

        assert (result.params.m, result.params.n) == (3, 2)
        np.testing.assert_allclose(C.to_array()[:, :2], b[:, :2] @ _full(a, 'U'), **TOL)
        np.testing.assert_array_equal(C.to_array()[:, 2:], np.zeros((3, 2)))


class TestHemm:

    @pytest.mark.parametrize("side", ['L', 'R'])
    @pytest.mark.parametrize("uplo", ['L', 'U'])
    def test_complex(self, rng, side, uplo):
        m, n = 2, 3
        order = m if side == 'L' else n
        a = _random(rng, (order, order), complex_=True)
        b, c = _random(rng, (m, n), complex_=True), _random(rng, (m, n), complex_=True)
        C = DenseMatrix.from_array(c)
        alpha, beta = 0.5 + 1j, -1.0

        result = hemm(DenseMatrix.from_array(a), DenseMatrix.from_array(b), C,
                      alpha, beta, side=side, uplo=uplo)

        H = _full(a, uplo, hermitian=True)
        product = H @ b if side == 'L' else b @ H
        np.testing.assert_allclose(C.to_array(), alpha * product + beta * c, **TOL)
        assert result.info['routine'] == 'zhemm'

    def test_real_dispatches_to_symm(self, rng):
        a, b = _random(rng, (2, 2)), _random(rng, (2, 2))
        C = DenseMatrix.zeros(2, 2)
        result = hemm(DenseMatrix.from_array(a), DenseMatrix.from_array(b), C, uplo='U')
        np.testing.assert_allclose(C.to_array(), _full(a, 'U') @ b, **TOL)
        assert result.info['routine'] == 'dsymm'
