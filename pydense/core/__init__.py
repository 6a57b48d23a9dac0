"""
Core infrastructure for PyDense.

This module provides the pieces shared by the blas and lapack entry points:
the operand type, the option model, the numeric domains, and the generic
resolve-validate-dispatch pipeline.

Key components:
    matrix: DenseMatrix operand
    options: Option model and sentinels
    domain: Real/complex domain trait and type dispatcher
    scalars: alpha/beta coercion
    pipeline: Family descriptors, ResolvedConfig, the pipeline stages
    protocols: Kernel protocol and StridedOperand
    result: Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
"""

from pydense.core.matrix import DenseMatrix
from pydense.core.protocols import Kernel, StridedOperand
from pydense.core.pipeline import ResolvedConfig
from pydense.core.result import Result
from pydense.core.domain import REAL, COMPLEX, NumericDomain
from pydense.core.exceptions import (
    PyDenseError,
    ValidationError,
    ConfigurationError,
    DimensionError,
    StrideError,
    OffsetError,
    BufferSizeError,
    DomainError,
    NonFiniteScalarError,
    NumericalError,
    KernelError,
    SingularMatrixError,
)

__all__ = [
    # Operands
    "DenseMatrix",
    # Kernel boundary
    "Kernel",
    "StridedOperand",
    "ResolvedConfig",
    # Result
    "Result",
    # Domains
    "REAL",
    "COMPLEX",
    "NumericDomain",
    # Exceptions
    "PyDenseError",
    "ValidationError",
    "ConfigurationError",
    "DimensionError",
    "StrideError",
    "OffsetError",
    "BufferSizeError",
    "DomainError",
    "NonFiniteScalarError",
    "NumericalError",
    "KernelError",
    "SingularMatrixError",
]
