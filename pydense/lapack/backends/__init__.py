"""
LAPACK kernels.

Available kernels:
    CPULapackKernel: CPU reference implementation on scipy.linalg.lapack
    GPULapackKernel: PyTorch implementation (CUDA, or CPU for validation)
"""

from pydense.lapack.backends.cpu import CPULapackKernel

__all__ = [
    "CPULapackKernel",
]
