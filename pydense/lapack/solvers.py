"""
Entry point for the LAPACK general solver.

gesv solves A * X = B by LU factorization with partial pivoting and
overwrites B with X. With a permutation buffer the LU factors replace A
and the row interchanges are written to the buffer; without one, A is
factored in a private copy and the caller's A is left untouched.
"""

from typing import Any, Literal, MutableSequence, Union

import numpy as np

from pydense.core.compute.device import select_device
from pydense.core.compute.timing import Timer
from pydense.core.exceptions import ConfigurationError, SingularMatrixError, ValidationError
from pydense.core.matrix import as_operand
from pydense.core.pipeline import ResolvedConfig, call_result, invoke, noop_result, prepare
from pydense.core.protocols import Kernel
from pydense.core.result import Result
from pydense.core.validation import check_buffer_length
from pydense.lapack.backends.cpu import CPULapackKernel
from pydense.lapack.families import GESV

KernelChoice = Union[Kernel, Literal['cpu', 'gpu', 'auto']]


def gesv(
    A: Any,
    B: Any,
    ipiv: MutableSequence[int] | None = None,
    *,
    kernel: KernelChoice = 'cpu',
    **options: Any,
) -> Result[ResolvedConfig | None]:
    """
    Solve A * X = B for a general square A.

    Args:
        A: n x n coefficient operand
        B: n x nrhs right-hand sides, overwritten with the solution
        ipiv: Optional permutation buffer (list or integer numpy array) of
            length at least n. When given, A is overwritten with its LU
            factors and ipiv[:n] with the 0-based row interchanges: row i
            was swapped with row ipiv[i].
        kernel: Kernel instance, or 'cpu', 'gpu', 'auto'
        **options: n, nrhs, ldA, ldB, offsetA, offsetB

    Returns:
        Result describing the call; params is None for a no-op

    Raises:
        DimensionError: A is not square when n is derived
        StrideError, OffsetError, BufferSizeError: Bounds violations,
            including an ipiv shorter than n
        DomainError: A and B of different domains
        SingularMatrixError: U is exactly singular. With ipiv, A and ipiv
            still hold the factorization; B is unchanged.
        KernelError: The kernel reported any other failure

    Example:
        >>> A = DenseMatrix.from_array([[2.0, 1.0], [1.0, 1.0]])
        >>> B = DenseMatrix.from_array([3.0, 2.0])
        >>> gesv(A, B)
        >>> B.to_array()
        array([[1.],
               [1.]])
    """
    timer = Timer()
    timer.start()

    a = as_operand(A, 'A')
    b = as_operand(B, 'B')
    if ipiv is not None:
        _check_pivot_buffer(ipiv)
    kernel_impl, notices = _get_kernel(kernel)

    def check_pivot_length(dims):
        if ipiv is not None:
            check_buffer_length(len(ipiv), dims['n'], 'ipiv', 'gesv')

    dims, call = prepare(GESV, {'A': a, 'B': b}, {}, options, timer,
                         extra_checks=check_pivot_length)
    if call is None:
        return noop_result(GESV, dims, kernel_impl, timer, notices)

    # without a pivot buffer the factorization happens in a private copy
    operands = {'A': a if ipiv is not None else a.copy(), 'B': b}
    pivots = np.zeros(dims['n'], dtype=np.int32)

    with timer.section('kernel'):
        try:
            status = invoke(kernel_impl, call, operands, pivots)
        except SingularMatrixError:
            if ipiv is not None:
                ipiv[:dims['n']] = pivots.tolist()
            raise

    if ipiv is not None:
        ipiv[:dims['n']] = pivots.tolist()
    return call_result(call, status, kernel_impl, timer, notices)


def _check_pivot_buffer(ipiv: Any) -> None:
    if isinstance(ipiv, np.ndarray):
        if ipiv.ndim != 1 or not np.issubdtype(ipiv.dtype, np.integer):
            raise ValidationError(
                f"ipiv: expected a 1-D integer array, got {ipiv.ndim}D {ipiv.dtype}"
            )
        return
    if not isinstance(ipiv, list):
        raise ValidationError(
            f"ipiv: expected a list or integer numpy array, got {type(ipiv).__name__}"
        )


def _get_kernel(choice: KernelChoice) -> tuple[Kernel, tuple[str, ...]]:
    """
    Select and instantiate the kernel for a call, with any fallback notices.

    Raises:
        ConfigurationError: If the choice is not recognized
        RuntimeError: If 'gpu' requested but no double-precision GPU is available
    """
    if isinstance(choice, Kernel):
        return choice, ()

    if choice == 'cpu':
        return CPULapackKernel(), ()

    if choice in ('gpu', 'auto'):
        device = select_device(choice)
        if device.is_gpu:
            from pydense.lapack.backends.gpu import GPULapackKernel
            return GPULapackKernel(device=device.torch_device), ()
        notices = (device.notice,) if device.notice else ()
        return CPULapackKernel(), notices

    raise ConfigurationError(f"Unknown kernel: {choice!r}. Use 'cpu', 'gpu', 'auto' or a Kernel instance.")
