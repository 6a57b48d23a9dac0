"""
PyDense: validated dispatch for dense level-3 BLAS and LAPACK gesv.

Every entry point resolves omitted options from the operand shapes,
checks strides, offsets and storage sizes, selects the real or complex
routine and hands a fully specified call to a compute kernel: SciPy's
BLAS/LAPACK on the CPU, or PyTorch on a GPU.

Submodules:
    blas: gemm, symm, hemm, syrk, herk, syr2k, her2k, trmm, trsm
    lapack: gesv
    core: operands, options, pipeline, exceptions
"""

__version__ = "0.1.0"
__author__ = "Hai-Shuo"
__email__ = "contact@sgcx.org"

from pydense import blas
from pydense import lapack
from pydense.core import DenseMatrix, Result, ResolvedConfig
from pydense.blas import gemm, symm, hemm, syrk, herk, syr2k, her2k, trmm, trsm
from pydense.lapack import gesv

__all__ = [
    "__version__",
    "blas",
    "lapack",
    "DenseMatrix",
    "Result",
    "ResolvedConfig",
    "gemm",
    "symm",
    "hemm",
    "syrk",
    "herk",
    "syr2k",
    "her2k",
    "trmm",
    "trsm",
    "gesv",
]
