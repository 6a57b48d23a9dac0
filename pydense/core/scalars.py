"""
Scalar coercion for alpha and beta.

Scalars arrive as Python or NumPy numbers, or as singleton matrices, and
leave as a Python float (real domain) or complex (complex domain) ready to
hand to a kernel.
"""

import numbers
from dataclasses import dataclass
from typing import Any, Literal

import numpy as np

from pydense.core.domain import NumericDomain
from pydense.core.exceptions import DomainError, ValidationError
from pydense.core.matrix import DenseMatrix
from pydense.core.validation import check_finite_scalar


@dataclass(frozen=True)
class ScalarRule:
    """
    How an operation treats one of its scalars.

    Attributes:
        name: 'alpha' or 'beta'
        default: Identity used when the scalar is absent
        real_only: Scalar must be real even for complex operands
            (the Hermitian updates take real alpha/beta)
    """
    name: Literal['alpha', 'beta']
    default: Literal['one', 'zero']
    real_only: bool = False


ALPHA = ScalarRule('alpha', 'one')
BETA = ScalarRule('beta', 'zero')


def scalar_value(value: Any, name: str) -> float | complex:
    """
    Unwrap a number or singleton into a Python float or complex.

    Raises:
        ValidationError: If value is not a number or a one-element matrix
    """
    if isinstance(value, DenseMatrix):
        if value.shape != (1, 1):
            raise ValidationError(f"{name}: expected a 1x1 matrix, got {value.rows}x{value.cols}")
        value = value.buffer[0]
    elif isinstance(value, np.ndarray):
        if value.size != 1:
            raise ValidationError(f"{name}: expected a single value, got array of shape {value.shape}")
        value = value.reshape(-1)[0]

    if isinstance(value, (bool, np.bool_)) or not isinstance(value, numbers.Number):
        raise ValidationError(f"{name}: expected a number, got {type(value).__name__}")
    if isinstance(value, numbers.Real):
        return float(value)
    return complex(value)


def coerce_scalar(value: Any, rule: ScalarRule, domain: NumericDomain) -> float | complex:
    """
    Coerce a scalar to the numeric domain of the operands.

    Args:
        value: Caller's scalar, or None when absent
        rule: Scalar rule of the operation
        domain: Shared domain of the operands

    Returns:
        float for the real domain (or a real-only scalar), complex otherwise

    Raises:
        ValidationError: If value is not a number
        DomainError: If a complex value with a nonzero imaginary part is
            supplied where a real value is required
        NonFiniteScalarError: If the coerced value is NaN or infinite
    """
    if value is None:
        coerced: float | complex = domain.one if rule.default == 'one' else domain.zero
        if rule.real_only:
            coerced = float(coerced.real)
    else:
        number = scalar_value(value, rule.name)
        if rule.real_only or not domain.is_complex:
            if isinstance(number, complex):
                if number.imag != 0:
                    where = "a real scalar" if domain.is_complex else "real operands"
                    raise DomainError(
                        f"{rule.name}: complex value {number!r} supplied where {where} required"
                    )
                number = number.real
            coerced = float(number)
        else:
            coerced = complex(number)

    check_finite_scalar(coerced, rule.name)
    return coerced
