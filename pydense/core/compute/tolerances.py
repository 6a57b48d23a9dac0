"""
Tolerance tiers for comparing kernels.

Every kernel computes in double precision, but different libraries
accumulate in different orders, so results agree to a tolerance rather
than bit for bit:
- CPU reference (SciPy BLAS/LAPACK) against a NumPy evaluation
- PyTorch kernel (CPU or CUDA) against the SciPy reference

Used by the test suite.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class ToleranceTier:
    """Tolerance specification for numerical comparison."""
    rtol: float
    atol: float
    name: str
    description: str


# SciPy kernel against a dense NumPy reference
CPU_FP64 = ToleranceTier(
    rtol=1e-12,
    atol=1e-12,
    name='cpu_fp64',
    description='SciPy BLAS/LAPACK double precision',
)

# PyTorch kernel against the SciPy kernel
TORCH_FP64 = ToleranceTier(
    rtol=1e-10,
    atol=1e-11,
    name='torch_fp64',
    description='PyTorch double precision, different accumulation order',
)


def select_tolerance(kernel_name: str) -> ToleranceTier:
    """Select appropriate tolerance tier for a given kernel."""
    if 'torch' in kernel_name:
        return TORCH_FP64
    return CPU_FP64
