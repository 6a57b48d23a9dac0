"""
Generic result container for all PyDense calls.

Every entry point mutates its output operand in place and returns this
envelope describing the call: the resolved configuration handed to the
kernel, which routine ran, the status it reported and how long each
pipeline stage took.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (family, routine, status, noop)
    - timing is optional (don't burden test doubles)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for a dispatched call.

    Type Parameters:
        P: The payload type (ResolvedConfig, or None for a no-op call)

    Attributes:
        params: Resolved configuration the kernel was invoked with
        info: Structured metadata ('family', 'routine', 'status', 'noop')
        timing: Execution timing breakdown, or None if not measured
        backend_name: Name of the kernel that ran the call
        warnings: Non-fatal issues encountered during the call

    Examples:
        >>> Result(
        ...     params=config,
        ...     info={'family': 'gemm', 'routine': 'dgemm', 'status': 0, 'noop': False},
        ...     timing={'total_seconds': 0.001, 'kernel': 0.0008},
        ...     backend_name='cpu_scipy'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    @property
    def noop(self) -> bool:
        """True if the call was a no-op and no kernel ran."""
        return bool(self.info.get('noop', False))

    @property
    def status(self) -> int | None:
        """Kernel status, or None if no kernel ran."""
        return self.info.get('status')

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
