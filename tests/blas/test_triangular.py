"""
Tests for trmm and trsm on the SciPy reference kernel.
"""

import numpy as np
import pytest

from pydense import DenseMatrix
from pydense.blas import trmm, trsm
from pydense.core.compute.tolerances import CPU_FP64
from pydense.core.exceptions import DimensionError, StrideError

TOL = dict(rtol=CPU_FP64.rtol, atol=CPU_FP64.atol)

VARIANTS = [
    (side, uplo, trans, diag)
    for side in ('L', 'R')
    for uplo in ('L', 'U')
    for trans in ('N', 'T', 'C')
    for diag in ('N', 'U')
]


def _random(rng, shape, complex_=False):
    X = rng.standard_normal(shape)
    if complex_:
        X = X + 1j * rng.standard_normal(shape)
    return X


def _triangle(a, uplo, diag):
    T = np.tril(a) if uplo == 'L' else np.triu(a)
    if diag == 'U':
        np.fill_diagonal(T, 1.0)
    return T


def _op(X, trans):
    if trans == 'N':
        return X
    if trans == 'T':
        return X.T
    return X.conj().T


def _well_conditioned(rng, order, complex_=False):
    return _random(rng, (order, order), complex_) + 4.0 * np.eye(order)


class TestTrmm:

    @pytest.mark.parametrize("side, uplo, trans, diag", VARIANTS)
    def test_complex_variants(self, rng, side, uplo, trans, diag):
        m, n = 3, 2
        order = m if side == 'L' else n
        a = _random(rng, (order, order), complex_=True)
        b = _random(rng, (m, n), complex_=True)
        B = DenseMatrix.from_array(b)

        trmm(DenseMatrix.from_array(a), B, alpha=2 - 1j,
             side=side, uplo=uplo, transA=trans, diag=diag)

        opT = _op(_triangle(a, uplo, diag), trans)
        product = opT @ b if side == 'L' else b @ opT
        np.testing.assert_allclose(B.to_array(), (2 - 1j) * product, **TOL)

    def test_real(self, rng):
        a, b = _random(rng, (3, 3)), _random(rng, (3, 4))
        B = DenseMatrix.from_array(b)
        result = trmm(DenseMatrix.from_array(a), B, uplo='U', transA='T')
        np.testing.assert_allclose(B.to_array(), np.triu(a).T @ b, **TOL)
        assert result.info['routine'] == 'dtrmm'
        assert result.params.beta is None

    def test_nonsquare_a(self, rng):
        A = DenseMatrix.from_array(_random(rng, (2, 3)))
        with pytest.raises(DimensionError):
            trmm(A, DenseMatrix.zeros(2, 2))


class TestTrsm:

    @pytest.mark.parametrize("side, uplo, trans, diag", VARIANTS)
    def test_real_variants(self, rng, side, uplo, trans, diag):
        m, n = 4, 3
        order = m if side == 'L' else n
        a = _well_conditioned(rng, order)
        b = _random(rng, (m, n))
        B = DenseMatrix.from_array(b)

        trsm(DenseMatrix.from_array(a), B, alpha=0.5,
             side=side, uplo=uplo, transA=trans, diag=diag)

        opT = _op(_triangle(a, uplo, diag), trans)
        X = B.to_array()
        residual = opT @ X if side == 'L' else X @ opT
        np.testing.assert_allclose(residual, 0.5 * b, rtol=1e-10, atol=1e-10)

    def test_complex(self, rng):
        a = _well_conditioned(rng, 3, complex_=True)
        b = _random(rng, (3, 2), complex_=True)
        B = DenseMatrix.from_array(b)

        result = trsm(DenseMatrix.from_array(a), B, transA='C')

        X = B.to_array()
        np.testing.assert_allclose(np.tril(a).conj().T @ X, b, rtol=1e-10, atol=1e-10)
        assert result.info['routine'] == 'ztrsm'

    def test_zero_alpha_clears_b(self, rng):
        a = _well_conditioned(rng, 2)
        B = DenseMatrix.from_array(_random(rng, (2, 2)))
        trsm(DenseMatrix.from_array(a), B, alpha=0.0)
        np.testing.assert_array_equal(B.to_array(), np.zeros((2, 2)))

    def test_empty_n_is_noop(self, rng):
        A = DenseMatrix.from_array(_well_conditioned(rng, 2))
        assert trsm(A, DenseMatrix.zeros(2, 0)).noop


class TestTriangularLeadingBlock:

    def test_trsm_taller_b(self):
        A = DenseMatrix.from_array(np.diag([2.0, 4.0]))
        B = DenseMatrix.from_array(np.array([[2.0], [8.0], [99.0]]))

        result = trsm(A, B)

        assert (result.params.m, result.params.n) == (2, 1)
        np.testing.assert_allclose(B.to_array(), [[1.0], [2.0], [99.0]], **TOL)

    def test_trmm_wider_b_on_right(self, rng):
        b = _random(rng, (2, 3))
        B = DenseMatrix.from_array(b)

        result = trmm(DenseMatrix.from_array(np.eye(2)), B, alpha=3.0, side='R')

        assert (result.params.m, result.params.n) == (2, 2)
        np.testing.assert_allclose(B.to_array()[:, :2], 3.0 * b[:, :2], **TOL)
        np.testing.assert_array_equal(B.to_array()[:, 2], b[:, 2])

    def test_trsm_b_shorter_than_a(self, rng):
        A = DenseMatrix.from_array(_well_conditioned(rng, 3))
        with pytest.raises(StrideError, match="ldB"):
            trsm(A, DenseMatrix.zeros(2, 2))
