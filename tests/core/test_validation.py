"""
Tests for input validation utilities.

Validates every function in core/validation.py:
    - check_array: conversion, dtype promotion, object rejection
    - check_buffer_dtype: float64/complex128 only
    - check_int_option / check_choice: option value kinds
    - check_square / check_matching: shape agreement
    - check_leading_dimension / check_offset / check_buffer_length: bounds
    - check_finite_scalar: NaN/Inf detection
"""

import numpy as np
import pytest

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
from pydense.core.validation import (
    check_array,
    check_buffer_dtype,
    check_buffer_length,
    check_choice,
    check_finite_scalar,
    check_int_option,
    check_leading_dimension,
    check_matching,
    check_offset,
    check_square,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to float64/complex128 and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "A")
        assert result.dtype == np.float64
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_float32_promoted(self):
        result = check_array(np.array([1.0, 2.0], dtype=np.float32), "A")
        assert result.dtype == np.float64

    def test_complex_promoted(self):
        result = check_array(np.array([1 + 2j], dtype=np.complex64), "A")
        assert result.dtype == np.complex128

    def test_object_rejected(self):
        with pytest.raises(ValidationError, match="object"):
            check_array([1, "a", None], "A")

    def test_bool_rejected(self):
        with pytest.raises(ValidationError, match="non-numeric"):
            check_array([True, False], "A")

    def test_strings_rejected(self):
        with pytest.raises(ValidationError):
            check_array(["a", "b"], "A")


class TestCheckBufferDtype:

    def test_float64_accepted(self):
        check_buffer_dtype(np.zeros(3), "A")

    def test_complex128_accepted(self):
        check_buffer_dtype(np.zeros(3, dtype=np.complex128), "A")

    @pytest.mark.parametrize("dtype", [np.float32, np.int64, np.complex64])
    def test_other_dtypes_rejected(self, dtype):
        with pytest.raises(DomainError, match="A"):
            check_buffer_dtype(np.zeros(3, dtype=dtype), "A")


# ═══════════════════════════════════════════════════════════════════════
# Option values
# ═══════════════════════════════════════════════════════════════════════


class TestCheckIntOption:

    def test_python_int(self):
        assert check_int_option(5, "m") == 5

    def test_numpy_int(self):
        value = check_int_option(np.int32(7), "m")
        assert value == 7
        assert type(value) is int

    def test_negative_passes(self):
        assert check_int_option(-1, "m") == -1

    def test_float_rejected(self):
        with pytest.raises(ConfigurationError, match="m"):
            check_int_option(2.0, "m")

    def test_bool_rejected(self):
        with pytest.raises(ConfigurationError):
            check_int_option(True, "m")

    def test_string_rejected(self):
        with pytest.raises(ConfigurationError):
            check_int_option("3", "m")


class TestCheckChoice:

    def test_valid(self):
        assert check_choice('T', ('N', 'T', 'C'), "transA") == 'T'

    def test_lowercase_rejected(self):
        with pytest.raises(ConfigurationError, match="transA"):
            check_choice('t', ('N', 'T', 'C'), "transA")

    def test_non_string_rejected(self):
        with pytest.raises(ConfigurationError):
            check_choice(0, ('L', 'R'), "side")


# ═══════════════════════════════════════════════════════════════════════
# Shapes
# ═══════════════════════════════════════════════════════════════════════


class TestShapeChecks:

    def test_square_passes(self):
        check_square(3, 3, 3, "A")

    def test_square_without_order(self):
        check_square(4, 4, None, "A")

    def test_not_square(self):
        with pytest.raises(DimensionError, match="square"):
            check_square(3, 2, None, "A")

    def test_wrong_order(self):
        with pytest.raises(DimensionError, match="order 4"):
            check_square(3, 3, 4, "A")

    def test_matching(self):
        check_matching(3, 3, "k from A", "k from B")

    def test_mismatch(self):
        with pytest.raises(DimensionError, match="k from A=3 does not match k from B=4"):
            check_matching(3, 4, "k from A", "k from B")


# ═══════════════════════════════════════════════════════════════════════
# Bounds
# ═══════════════════════════════════════════════════════════════════════


class TestBoundsChecks:

    def test_stride_at_minimum(self):
        check_leading_dimension(3, 3, "ldA")

    def test_stride_below_minimum(self):
        with pytest.raises(StrideError) as exc_info:
            check_leading_dimension(2, 3, "ldA")
        assert exc_info.value.minimum == 3
        assert exc_info.value.value == 2

    def test_stride_minimum_is_one_for_empty_rows(self):
        check_leading_dimension(1, 0, "ldA")
        with pytest.raises(StrideError):
            check_leading_dimension(0, 0, "ldA")

    def test_offset_zero(self):
        check_offset(0, "offsetA")

    def test_negative_offset(self):
        with pytest.raises(OffsetError, match="offsetA"):
            check_offset(-1, "offsetA")

    def test_buffer_exact(self):
        check_buffer_length(9, 9, "A")

    def test_buffer_short(self):
        with pytest.raises(BufferSizeError) as exc_info:
            check_buffer_length(8, 9, "A")
        assert exc_info.value.required == 9
        assert exc_info.value.available == 8


class TestCheckFiniteScalar:

    def test_finite(self):
        check_finite_scalar(1.5, "alpha")
        check_finite_scalar(1 + 2j, "alpha")

    @pytest.mark.parametrize("value", [float('nan'), float('inf'), -float('inf'),
                                       complex(1, float('nan')), complex(float('inf'), 0)])
    def test_non_finite(self, value):
        with pytest.raises(NonFiniteScalarError):
            check_finite_scalar(value, "alpha")
