"""
Core protocols for PyDense.

These define the structural interface of the compute-kernel boundary. We
use Protocol (structural typing) rather than ABC (nominal typing) so that
any object with the right shape can act as a kernel: the SciPy and PyTorch
kernels shipped here, a vendor library binding, or a test double that
records calls and returns canned statuses.

Design Principles:
    - Minimal contract: name + routine lookup
    - Routines receive fully resolved, validated arguments only
    - Routines report failure through an integer status, never by raising
"""

from dataclasses import dataclass
from typing import Any, Callable, Protocol, runtime_checkable

import numpy as np
from numpy.lib.stride_tricks import as_strided
from numpy.typing import NDArray


@dataclass(frozen=True, eq=False)
class StridedOperand:
    """
    What a kernel receives for each operand: base buffer, validated offset
    and validated leading stride. Element (i, j) of the operand as the
    kernel sees it is buffer[offset + i + j * ld].
    """
    buffer: NDArray[Any]
    offset: int
    ld: int

    def matrix(self, rows: int, cols: int) -> NDArray[Any]:
        """
        Writable (rows x cols) view into the buffer.

        The view shares memory with the operand, so assigning into it
        updates the caller's storage. Bounds validation guarantees the
        view stays inside the buffer.
        """
        base = self.buffer[self.offset:]
        item = base.itemsize
        if rows == 0 or cols == 0:
            return np.empty((rows, cols), dtype=base.dtype, order='F')
        return as_strided(base, shape=(rows, cols), strides=(item, self.ld * item))


@runtime_checkable
class Kernel(Protocol):
    """
    Protocol for compute kernels.

    A kernel is a table of routines named after their BLAS/LAPACK
    counterparts ('dgemm', 'zherk', 'dgesv', ...). Each routine is called
    as routine(config, *operands) where config is the ResolvedConfig of the
    call and operands are StridedOperand views in the operation's operand
    order; gesv routines additionally receive an int32 pivot array of
    length n. A routine mutates the output operand in place and returns an
    integer status: 0 on success, nonzero on a routine-specific failure.

    Kernels are stateless with respect to calls. All configuration is
    passed at construction time.
    """

    @property
    def name(self) -> str:
        """
        Kernel identifier.

        Convention: '{device}_{library}'
        Examples: 'cpu_scipy', 'cuda_torch'
        """
        ...

    def get_routine(self, routine: str) -> Callable[..., int]:
        """
        Look up a routine by name.

        Raises:
            ConfigurationError: If the kernel does not provide the routine
        """
        ...
