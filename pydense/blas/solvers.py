"""
Entry points for level-3 BLAS.

Each function validates its operands and options, resolves the call and
hands it to a kernel, which updates the output operand in place:

    gemm    C := alpha * op(A) * op(B) + beta * C
    symm    C := alpha * A * B + beta * C   (or B * A), A symmetric
    hemm    as symm with A Hermitian
    syrk    C := alpha * A * A^T + beta * C   (or A^T * A), one triangle of C
    herk    as syrk with conjugate transposes, alpha and beta real
    syr2k   C := alpha * A * B^T + alpha * B * A^T + beta * C
    her2k   C := alpha * A * B^H + conj(alpha) * B * A^H + beta * C, beta real
    trmm    B := alpha * op(A) * B   (or B * op(A)), A triangular
    trsm    B := alpha * op(A)^-1 * B   (or B * op(A)^-1), A triangular

Operands are DenseMatrix instances or Fortran-contiguous float64/complex128
arrays. Options (m, n, k, ldA, offsetB, transA, uplo, ...) are keyword
arguments; any option left out takes its default. See the module docs of
pydense.core.options for the sentinel conventions.
"""

from typing import Any, Literal, Union

from pydense.core.compute.device import select_device
from pydense.core.exceptions import ConfigurationError
from pydense.core.matrix import as_operand
from pydense.core.pipeline import Family, ResolvedConfig, execute
from pydense.core.protocols import Kernel
from pydense.core.result import Result
from pydense.blas.backends.cpu import CPUBlasKernel
from pydense.blas.families import (
    GEMM, HEMM, HER2K, HERK, SYMM, SYR2K, SYRK, TRMM, TRSM,
)

KernelChoice = Union[Kernel, Literal['cpu', 'gpu', 'auto']]


def gemm(A: Any, B: Any, C: Any, alpha: Any = None, beta: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    General matrix-matrix product, C := alpha * op(A) * op(B) + beta * C.

    Args:
        A, B: Input operands
        C: Output operand, updated in place
        alpha: Scalar multiplier of the product (default 1)
        beta: Scalar multiplier of C (default 0)
        kernel: Kernel instance, or 'cpu', 'gpu', 'auto'
        **options: transA, transB ('N', 'T', 'C'), m, n, k, ldA, ldB, ldC,
            offsetA, offsetB, offsetC

    Returns:
        Result describing the call; params is None for a no-op

    Raises:
        ConfigurationError: Unknown option or malformed option value
        DimensionError: Derived k differs between A and B
        StrideError, OffsetError, BufferSizeError: Bounds violations
        DomainError: Operands of mixed domains, or a complex scalar
            for real operands
        NonFiniteScalarError: alpha or beta is NaN or infinite
        KernelError: The kernel reported a failure

    Example:
        >>> A = DenseMatrix.from_array([[1.0, 2.0], [3.0, 4.0]])
        >>> C = DenseMatrix.zeros(2, 2)
        >>> gemm(A, A, C, transB='T')
        >>> C.to_array()
    """
    return _run(GEMM, {'A': A, 'B': B, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def symm(A: Any, B: Any, C: Any, alpha: Any = None, beta: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Symmetric matrix product, C := alpha * A * B + beta * C (side='L') or
    C := alpha * B * A + beta * C (side='R').

    Only the uplo triangle of A is read. Options: side, uplo, m, n, ldA,
    ldB, ldC, offsetA, offsetB, offsetC.
    """
    return _run(SYMM, {'A': A, 'B': B, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def hemm(A: Any, B: Any, C: Any, alpha: Any = None, beta: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Hermitian matrix product; symm with A Hermitian.

    For real operands this is exactly symm.
    """
    return _run(HEMM, {'A': A, 'B': B, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def syrk(A: Any, C: Any, alpha: Any = None, beta: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Symmetric rank-k update, C := alpha * A * A^T + beta * C (trans='N')
    or C := alpha * A^T * A + beta * C (trans='T').

    Only the uplo triangle of C is referenced and updated. For complex
    operands trans must be 'N' or 'T'. Options: uplo, trans, n, k, ldA,
    ldC, offsetA, offsetC.
    """
    return _run(SYRK, {'A': A, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def herk(A: Any, C: Any, alpha: Any = None, beta: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Hermitian rank-k update, C := alpha * A * A^H + beta * C (trans='N')
    or C := alpha * A^H * A + beta * C (trans='C').

    alpha and beta must be real. For complex operands trans must be 'N'
    or 'C'.
    """
    return _run(HERK, {'A': A, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def syr2k(A: Any, B: Any, C: Any, alpha: Any = None, beta: Any = None, *,
          kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Symmetric rank-2k update,
    C := alpha * (A * B^T + B * A^T) + beta * C (trans='N'), or the
    transposed form for trans='T'.

    A and B have the same shape. Options: uplo, trans, n, k, ldA, ldB,
    ldC, offsetA, offsetB, offsetC.
    """
    return _run(SYR2K, {'A': A, 'B': B, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def her2k(A: Any, B: Any, C: Any, alpha: Any = None, beta: Any = None, *,
          kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Hermitian rank-2k update,
    C := alpha * A * B^H + conj(alpha) * B * A^H + beta * C.

    alpha may be complex; beta must be real.
    """
    return _run(HER2K, {'A': A, 'B': B, 'C': C}, {'alpha': alpha, 'beta': beta}, options, kernel)


def trmm(A: Any, B: Any, alpha: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Triangular matrix product, B := alpha * op(A) * B (side='L') or
    B := alpha * B * op(A) (side='R').

    Options: side, uplo, transA, diag ('N' or 'U' for a unit diagonal),
    m, n, ldA, ldB, offsetA, offsetB.
    """
    return _run(TRMM, {'A': A, 'B': B}, {'alpha': alpha}, options, kernel)


def trsm(A: Any, B: Any, alpha: Any = None, *,
         kernel: KernelChoice = 'cpu', **options: Any) -> Result[ResolvedConfig | None]:
    """
    Triangular solve with multiple right-hand sides,
    B := alpha * op(A)^-1 * B (side='L') or B := alpha * B * op(A)^-1.

    A singular triangular A is not detected; the result then contains
    infinities or NaN as the underlying BLAS produces them.
    """
    return _run(TRSM, {'A': A, 'B': B}, {'alpha': alpha}, options, kernel)


def _run(
    family: Family,
    operands: dict[str, Any],
    scalars: dict[str, Any],
    options: dict[str, Any],
    choice: KernelChoice,
) -> Result[ResolvedConfig | None]:
    # Validate at the boundary, trust everywhere else
    matrices = {role: as_operand(value, role) for role, value in operands.items()}
    kernel, notices = _get_kernel(choice)
    return execute(family, matrices, scalars, options, kernel, notices)


def _get_kernel(choice: KernelChoice) -> tuple[Kernel, tuple[str, ...]]:
    """
    Select and instantiate the kernel for a call.

    Args:
        choice: Kernel instance, or 'cpu', 'gpu', 'auto'

    Returns:
        (kernel, notices), where notices explain a fallback to the CPU

    Raises:
        ConfigurationError: If the choice is not recognized
        RuntimeError: If 'gpu' requested but no double-precision GPU is available
    """
    if isinstance(choice, Kernel):
        return choice, ()

    if choice == 'cpu':
        return CPUBlasKernel(), ()

    if choice in ('gpu', 'auto'):
        device = select_device(choice)
        if device.is_gpu:
            from pydense.blas.backends.gpu import GPUBlasKernel
            return GPUBlasKernel(device=device.torch_device), ()
        notices = (device.notice,) if device.notice else ()
        return CPUBlasKernel(), notices

    raise ConfigurationError(f"Unknown kernel: {choice!r}. Use 'cpu', 'gpu', 'auto' or a Kernel instance.")
