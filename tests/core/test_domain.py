"""
Tests for numeric domains and the type dispatcher.
"""

import numpy as np
import pytest

from pydense import DenseMatrix
from pydense.core.domain import COMPLEX, REAL, common_domain, domain_of_dtype, normalize_trans
from pydense.core.exceptions import ConfigurationError, DomainError


class TestNumericDomain:

    def test_identities(self):
        assert REAL.one == 1.0 and isinstance(REAL.one, float)
        assert REAL.zero == 0.0
        assert COMPLEX.one == 1 + 0j and isinstance(COMPLEX.one, complex)

    def test_prefixes(self):
        assert REAL.prefix == 'd'
        assert COMPLEX.prefix == 'z'

    def test_str(self):
        assert str(REAL) == 'real'
        assert str(COMPLEX) == 'complex'

    def test_domain_of_dtype(self):
        assert domain_of_dtype(np.float64) is REAL
        assert domain_of_dtype(np.complex128) is COMPLEX
        with pytest.raises(DomainError):
            domain_of_dtype(np.float32)


class TestCommonDomain:

    def test_all_real(self):
        operands = {'A': DenseMatrix.zeros(2, 2), 'B': DenseMatrix.zeros(2, 2)}
        assert common_domain(operands) is REAL

    def test_all_complex(self):
        operands = {'A': DenseMatrix.zeros(2, 2, dtype='complex')}
        assert common_domain(operands) is COMPLEX

    def test_mixed_names_roles(self):
        operands = {
            'A': DenseMatrix.zeros(2, 2),
            'B': DenseMatrix.zeros(2, 2, dtype='complex'),
            'C': DenseMatrix.zeros(2, 2),
        }
        with pytest.raises(DomainError, match="A=real, B=complex, C=real"):
            common_domain(operands)


class TestNormalizeTrans:

    def test_real_conjugate_is_transpose(self):
        assert normalize_trans('C', REAL, None, 'transA') == 'T'

    def test_real_restriction_ignored(self):
        assert normalize_trans('C', REAL, frozenset({'N', 'T'}), 'trans') == 'T'

    def test_complex_keeps_letter(self):
        assert normalize_trans('C', COMPLEX, None, 'transA') == 'C'

    def test_complex_restricted(self):
        assert normalize_trans('T', COMPLEX, frozenset({'N', 'T'}), 'trans') == 'T'
        with pytest.raises(ConfigurationError, match="trans='C'"):
            normalize_trans('C', COMPLEX, frozenset({'N', 'T'}), 'trans')
