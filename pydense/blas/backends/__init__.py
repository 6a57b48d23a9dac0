"""
Level-3 BLAS kernels.

Available kernels:
    CPUBlasKernel: CPU reference implementation on scipy.linalg.blas
    GPUBlasKernel: PyTorch implementation (CUDA, or CPU for validation)
"""

from pydense.blas.backends.cpu import CPUBlasKernel

__all__ = [
    "CPUBlasKernel",
]
