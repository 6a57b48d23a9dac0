"""
Numeric domains and the type dispatcher.

Every operand lives in exactly one numeric domain: real (float64) or
complex (complex128). The domain supplies the scalar identities used for
absent alpha/beta, the routine-name prefix of its kernels, and the
transpose letters its kernels understand. It is the only thing that
distinguishes the real and complex code paths; shape resolution and
bounds validation are domain-agnostic.
"""

from dataclasses import dataclass
from typing import Any, Literal, TYPE_CHECKING

import numpy as np

from pydense.core.exceptions import ConfigurationError, DomainError

if TYPE_CHECKING:
    from pydense.core.matrix import DenseMatrix


@dataclass(frozen=True)
class NumericDomain:
    """
    A numeric domain trait.

    Attributes:
        name: 'real' or 'complex'
        dtype: Element dtype of operands in this domain
        prefix: BLAS/LAPACK routine prefix ('d' or 'z')
    """
    name: Literal['real', 'complex']
    dtype: np.dtype
    prefix: str

    @property
    def is_complex(self) -> bool:
        return self.name == 'complex'

    @property
    def one(self) -> float | complex:
        """Multiplicative identity, the default alpha."""
        return complex(1.0, 0.0) if self.is_complex else 1.0

    @property
    def zero(self) -> float | complex:
        """Additive identity, the default beta."""
        return complex(0.0, 0.0) if self.is_complex else 0.0

    def __str__(self) -> str:
        return self.name


REAL = NumericDomain(name='real', dtype=np.dtype(np.float64), prefix='d')
COMPLEX = NumericDomain(name='complex', dtype=np.dtype(np.complex128), prefix='z')


def domain_of_dtype(dtype: Any) -> NumericDomain:
    """
    Map a dtype to its domain.

    Raises:
        DomainError: If dtype is neither float64 nor complex128
    """
    dtype = np.dtype(dtype)
    if dtype == REAL.dtype:
        return REAL
    if dtype == COMPLEX.dtype:
        return COMPLEX
    raise DomainError(f"unsupported dtype {dtype}, expected float64 or complex128")


def common_domain(operands: dict[str, 'DenseMatrix']) -> NumericDomain:
    """
    Return the single domain shared by every operand of a call.

    Args:
        operands: Operand role -> operand, in argument order

    Returns:
        The shared NumericDomain

    Raises:
        DomainError: If operands mix real and complex storage
    """
    domains = {role: matrix.domain for role, matrix in operands.items()}
    distinct = set(domains.values())
    if len(distinct) != 1:
        details = ", ".join(f"{role}={domain}" for role, domain in domains.items())
        raise DomainError(f"operands not of same type: {details}")
    return distinct.pop()


def normalize_trans(
    value: str,
    domain: NumericDomain,
    allowed_complex: frozenset[str] | None,
    name: str,
) -> str:
    """
    Normalize a transpose letter for the given domain.

    In the real domain 'C' means the same as 'T'. In the complex domain an
    operation may restrict the letters its kernels accept (symmetric rank
    updates take 'N'/'T', Hermitian ones 'N'/'C').

    Raises:
        ConfigurationError: If the letter is not allowed for complex operands
    """
    if not domain.is_complex:
        return 'T' if value == 'C' else value
    if allowed_complex is not None and value not in allowed_complex:
        raise ConfigurationError(
            f"{name}={value!r} is not allowed for complex operands, "
            f"expected one of {sorted(allowed_complex)}"
        )
    return value
