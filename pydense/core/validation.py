"""
Input validation utilities for PyDense.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

import cmath
import operator
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydense.core.exceptions import (
    BufferSizeError,
    ConfigurationError,
    DimensionError,
    DomainError,
    NonFiniteScalarError,
    OffsetError,
    StrideError,
    ValidationError,
)

# dtypes a backing buffer may have
SUPPORTED_DTYPES = (np.dtype(np.float64), np.dtype(np.complex128))


def check_array(array: ArrayLike, name: str) -> NDArray[Any]:
    """
    Validate and convert input to a float64 or complex128 numpy array.

    Integer and lower-precision floating data are promoted; complex data is
    promoted to complex128. Inputs that end up with object or non-numeric
    dtype are rejected.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with dtype float64 or complex128

    Raises:
        ValidationError: If input cannot be converted to a numeric array
    """
    try:
        result = np.asarray(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number) or np.issubdtype(result.dtype, np.bool_):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if np.issubdtype(result.dtype, np.complexfloating):
        return result.astype(np.complex128, copy=False)
    return result.astype(np.float64, copy=False)


def check_buffer_dtype(buffer: NDArray[Any], name: str) -> None:
    """
    Verify a backing buffer holds float64 or complex128 elements.

    Args:
        buffer: Buffer to check
        name: Parameter name for error messages

    Raises:
        DomainError: If the dtype is not one of the supported domains
    """
    if buffer.dtype not in SUPPORTED_DTYPES:
        raise DomainError(
            f"{name}: unsupported dtype {buffer.dtype}, expected float64 or complex128"
        )


def check_int_option(value: Any, name: str) -> int:
    """
    Verify an integer-valued option and return it as a Python int.

    Accepts Python and NumPy integers. Booleans are rejected even though
    they are integers in Python.

    Raises:
        ConfigurationError: If value is not an integer
    """
    if isinstance(value, (bool, np.bool_)):
        raise ConfigurationError(f"{name}: expected an integer, got {value!r}")
    try:
        return operator.index(value)
    except TypeError as e:
        raise ConfigurationError(
            f"{name}: expected an integer, got {type(value).__name__} {value!r}"
        ) from e


def check_choice(value: Any, choices: tuple[str, ...], name: str) -> str:
    """
    Verify an enumerated option is one of the allowed letters.

    Raises:
        ConfigurationError: If value is not in choices
    """
    if not isinstance(value, str) or value not in choices:
        raise ConfigurationError(
            f"{name}: expected one of {list(choices)}, got {value!r}"
        )
    return value


def check_square(rows: int, cols: int, order: int | None, name: str) -> None:
    """
    Verify an operand is square, and of the given order when one is given.

    Raises:
        DimensionError: If the operand is not square or has the wrong order
    """
    if rows != cols:
        raise DimensionError(f"{name}: expected a square matrix, got {rows}x{cols}")
    if order is not None and rows != order:
        raise DimensionError(
            f"{name}: expected order {order} to match the other operand, got {rows}x{cols}"
        )


def check_matching(derived: int, other: int, name: str, other_name: str) -> None:
    """
    Verify a derived dimension agrees with the same dimension taken from
    another operand.

    Raises:
        DimensionError: If the two derivations differ
    """
    if derived != other:
        raise DimensionError(
            f"{name}={derived} does not match {other_name}={other}"
        )


def _where(name: str, operation: str | None) -> str:
    return f"{operation}: {name}" if operation else name


def check_leading_dimension(ld: int, extent: int, name: str, operation: str | None = None) -> None:
    """
    Verify a leading stride covers the number of stored rows it strides over.

    Args:
        ld: Resolved stride
        extent: Number of stored rows the kernel reads per column
        name: Option name ('ldA', 'ldB', 'ldC')
        operation: Operation name for the message

    Raises:
        StrideError: If ld < max(1, extent)
    """
    minimum = max(1, extent)
    if ld < minimum:
        raise StrideError(
            f"{_where(name, operation)}: must be at least {minimum}, got {ld}",
            name=name, value=ld, minimum=minimum
        )


def check_offset(offset: int, name: str, operation: str | None = None) -> None:
    """
    Verify a buffer offset is nonnegative.

    Raises:
        OffsetError: If offset < 0
    """
    if offset < 0:
        raise OffsetError(
            f"{_where(name, operation)}: must be nonnegative, got {offset}",
            name=name, value=offset
        )


def check_buffer_length(available: int, required: int, name: str, operation: str | None = None) -> None:
    """
    Verify a backing store holds at least the required number of elements.

    Raises:
        BufferSizeError: If available < required
    """
    if available < required:
        raise BufferSizeError(
            f"{_where(name, operation)}: buffer holds {available} elements, "
            f"at least {required} required",
            name=name, required=required, available=available
        )


def check_finite_scalar(value: float | complex, name: str) -> None:
    """
    Verify a coerced scalar is neither NaN nor infinite.

    Raises:
        NonFiniteScalarError: If value is not finite
    """
    if not cmath.isfinite(value):
        raise NonFiniteScalarError(f"{name}: not a finite number ({value!r})", name=name, value=value)
