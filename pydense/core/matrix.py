"""
Dense matrix operand.

DenseMatrix is the "I have storage" abstraction: a flat, column-major
backing buffer plus the shape and stride used to read it. The dispatch
layer only reads its metadata and hands sub-ranges of the buffer to a
kernel; it never allocates or frees operand storage on its own.

Usage:
    from pydense import DenseMatrix

    A = DenseMatrix.from_array([[2.0, 1.0], [1.0, 1.0]])
    C = DenseMatrix.zeros(3, 3, dtype='complex')
    V = DenseMatrix.from_buffer(buf, rows=2, cols=2, ld=4)   # no copy

    A.shape, A.ld, A.size, A.domain
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pydense.core.domain import COMPLEX, REAL, NumericDomain, domain_of_dtype
from pydense.core.exceptions import DimensionError, ValidationError
from pydense.core.validation import check_array, check_buffer_dtype


@dataclass(frozen=True, eq=False)
class DenseMatrix:
    """
    A rows x cols matrix stored column-major in a flat buffer.

    Element (i, j) lives at buffer[i + j * ld]. The buffer may be longer
    than rows * cols (views into larger storage, padded strides); its
    length is the capacity bounds validation checks against.

    Construct via factory classmethods, not directly.
    """
    _buffer: NDArray[Any]
    _rows: int
    _cols: int
    _ld: int

    # === Factory Methods ===

    @classmethod
    def from_array(cls, array: ArrayLike) -> DenseMatrix:
        """
        Copy a 1-D or 2-D array-like into a new column-major matrix.

        A 1-D input becomes a column vector.
        """
        arr = check_array(array, 'array')
        if arr.ndim == 1:
            arr = arr.reshape(-1, 1)
        if arr.ndim != 2:
            raise DimensionError(
                f"array: expected 1D or 2D array, got {arr.ndim}D with shape {arr.shape}"
            )
        rows, cols = arr.shape
        buffer = np.array(arr, order='F').reshape(-1, order='F')
        return cls(_buffer=buffer, _rows=rows, _cols=cols, _ld=max(1, rows))

    @classmethod
    def from_buffer(
        cls,
        buffer: NDArray[Any],
        rows: int,
        cols: int,
        ld: int | None = None,
    ) -> DenseMatrix:
        """
        Wrap an existing 1-D buffer without copying.

        Writes through the returned matrix are visible in `buffer`.

        Args:
            buffer: Contiguous 1-D float64 or complex128 array
            rows: Number of rows
            cols: Number of columns
            ld: Stride between columns, defaults to max(1, rows)
        """
        if not isinstance(buffer, np.ndarray) or buffer.ndim != 1:
            raise ValidationError("buffer: expected a 1-D numpy array")
        if not buffer.flags.c_contiguous:
            raise ValidationError("buffer: expected a contiguous array")
        check_buffer_dtype(buffer, 'buffer')
        if rows < 0 or cols < 0:
            raise DimensionError(f"shape must be nonnegative, got {rows}x{cols}")
        if ld is None:
            ld = max(1, rows)
        if ld < max(1, rows):
            raise DimensionError(f"ld: must be at least max(1, rows)={max(1, rows)}, got {ld}")
        return cls(_buffer=buffer, _rows=rows, _cols=cols, _ld=ld)

    @classmethod
    def zeros(
        cls,
        rows: int,
        cols: int,
        dtype: Literal['real', 'complex'] = 'real',
    ) -> DenseMatrix:
        """Allocate a zero-filled matrix in the given domain."""
        domain = COMPLEX if dtype == 'complex' else REAL
        buffer = np.zeros(rows * cols, dtype=domain.dtype)
        return cls(_buffer=buffer, _rows=rows, _cols=cols, _ld=max(1, rows))

    # === Properties ===

    @property
    def buffer(self) -> NDArray[Any]:
        """Flat backing store (shared, not a copy)."""
        return self._buffer

    @property
    def rows(self) -> int:
        return self._rows

    @property
    def cols(self) -> int:
        return self._cols

    @property
    def shape(self) -> tuple[int, int]:
        return (self._rows, self._cols)

    @property
    def ld(self) -> int:
        """Storage stride between consecutive columns."""
        return self._ld

    @property
    def size(self) -> int:
        """Element capacity of the backing store."""
        return int(self._buffer.size)

    @property
    def domain(self) -> NumericDomain:
        return domain_of_dtype(self._buffer.dtype)

    # === Conversion ===

    def copy(self) -> DenseMatrix:
        """Independent matrix over a copy of the whole backing store."""
        return DenseMatrix(
            _buffer=self._buffer.copy(), _rows=self._rows, _cols=self._cols, _ld=self._ld
        )

    def to_array(self) -> NDArray[Any]:
        """Return the rows x cols block as a new 2-D array."""
        out = np.empty((self._rows, self._cols), dtype=self._buffer.dtype, order='F')
        for j in range(self._cols):
            start = j * self._ld
            out[:, j] = self._buffer[start:start + self._rows]
        return out

    def __repr__(self) -> str:
        return (
            f"DenseMatrix({self._rows}x{self._cols}, ld={self._ld}, "
            f"size={self.size}, domain={self.domain})"
        )


def as_operand(value: Any, name: str) -> DenseMatrix:
    """
    Interpret a caller argument as a matrix operand.

    DenseMatrix instances pass through. NumPy arrays are wrapped without
    copying so in-place results reach the caller; they must therefore be
    Fortran-contiguous (1-D arrays are column vectors) and already float64
    or complex128.

    Args:
        value: DenseMatrix or numpy array
        name: Parameter name for error messages

    Raises:
        ValidationError: If value is neither, or an array cannot be wrapped
            without copying
        DomainError: If an array has an unsupported dtype
    """
    if isinstance(value, DenseMatrix):
        return value
    if not isinstance(value, np.ndarray):
        raise ValidationError(
            f"{name}: expected DenseMatrix or numpy array, got {type(value).__name__}"
        )
    check_buffer_dtype(value, name)
    if value.ndim == 1:
        value = value.reshape(-1, 1)
    if value.ndim != 2:
        raise DimensionError(
            f"{name}: expected 1D or 2D array, got {value.ndim}D with shape {value.shape}"
        )
    if not value.flags.f_contiguous:
        raise ValidationError(
            f"{name}: array must be Fortran-contiguous to be used in place "
            f"(use np.asfortranarray or DenseMatrix.from_array)"
        )
    rows, cols = value.shape
    buffer = value.reshape(-1, order='F')
    return DenseMatrix(_buffer=buffer, _rows=rows, _cols=cols, _ld=max(1, rows))
