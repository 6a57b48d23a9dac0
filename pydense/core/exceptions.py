"""
Exception hierarchy for PyDense.

All exceptions inherit from PyDenseError to allow catching any
library-specific error. Validation failures are raised before any kernel
is invoked; kernel failures carry the status the kernel reported.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs required values
    - Never catch and re-raise with less information
"""


class PyDenseError(Exception):
    """Base exception for all PyDense errors."""
    pass


class ValidationError(PyDenseError):
    """
    Input validation failed.

    Raised when user-provided operands, scalars or options fail validation
    checks. Nothing has been written to any operand when this is raised.
    """
    pass


class ConfigurationError(ValidationError):
    """
    Option set is malformed.

    Raised for an option name the operation does not recognize, for an
    option value of the wrong kind, or when a kernel does not provide the
    routine a call needs.
    """
    pass


class DimensionError(ValidationError):
    """
    Operand dimensions are incorrect or inconsistent.

    Raised when a derived dimension disagrees between operands, or when an
    operand that must be square is not.
    """
    pass


class StrideError(ValidationError):
    """
    Leading stride is below its required minimum.

    Attributes:
        name: Option name of the stride (e.g. 'ldA')
        value: Resolved stride
        minimum: Smallest stride the operation accepts
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        value: int | None = None,
        minimum: int | None = None
    ):
        super().__init__(message)
        self.name = name
        self.value = value
        self.minimum = minimum


class OffsetError(ValidationError):
    """
    Buffer offset is negative.

    Attributes:
        name: Option name of the offset (e.g. 'offsetB')
        value: Offending offset
    """

    def __init__(self, message: str, name: str | None = None, value: int | None = None):
        super().__init__(message)
        self.name = name
        self.value = value


class BufferSizeError(ValidationError):
    """
    Backing storage is too small.

    Raised when an operand cannot hold every element the kernel will touch
    for the resolved offset, stride and dimensions, or when a permutation
    buffer is shorter than the system order.

    Attributes:
        name: Operand name
        required: Number of elements needed
        available: Number of elements present
    """

    def __init__(
        self,
        message: str,
        name: str | None = None,
        required: int | None = None,
        available: int | None = None
    ):
        super().__init__(message)
        self.name = name
        self.required = required
        self.available = available


class DomainError(ValidationError):
    """
    Numeric domains are incompatible.

    Raised when operands of one call do not share a single domain (real or
    complex), or when a scalar with a nonzero imaginary part is supplied to
    a real-domain operation.
    """
    pass


class NonFiniteScalarError(ValidationError):
    """
    Scaling scalar is NaN or infinite after coercion.

    Attributes:
        name: Scalar name ('alpha' or 'beta')
        value: The coerced value
    """

    def __init__(self, message: str, name: str | None = None, value: complex | float | None = None):
        super().__init__(message)
        self.name = name
        self.value = value


class NumericalError(PyDenseError):
    """
    Numerical computation failed.

    Base class for errors reported by a compute kernel.
    """
    pass


class KernelError(NumericalError):
    """
    Compute kernel returned a nonzero status.

    The kernel may have partially written its output operand according to
    its own documented semantics; nothing is rolled back.

    Attributes:
        routine: Kernel routine name (e.g. 'dgesv')
        status: Status value the kernel returned
    """

    def __init__(self, message: str, routine: str | None = None, status: int | None = None):
        super().__init__(message)
        self.routine = routine
        self.status = status


class SingularMatrixError(KernelError):
    """
    Matrix is exactly singular.

    Raised when LU factorization completes with a zero pivot, so the
    solution could not be computed. The status is the 1-based index of the
    zero diagonal element of U.

    Attributes:
        matrix_name: Name of the factored operand
    """

    def __init__(
        self,
        message: str,
        routine: str | None = None,
        status: int | None = None,
        matrix_name: str | None = None
    ):
        super().__init__(message, routine=routine, status=status)
        self.matrix_name = matrix_name
