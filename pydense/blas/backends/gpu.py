"""
PyTorch kernel for level-3 BLAS.

Performance path for large problems on CUDA; validated against the SciPy
reference kernel. Everything is computed in float64/complex128: MPS has
no double precision and is refused.

Operands are copied to the device, the update is formed with dense tensor
algebra and the affected block is copied back into the caller's buffer.
Symmetric and Hermitian inputs are expanded from their stored triangle,
and rank-k updates write only the selected triangle of C, so the
untouched triangle of C keeps its contents exactly as with BLAS.
"""

from functools import partial
from typing import Any, Callable

from pydense.core.compute.transfer import resolve_torch_device, to_device, to_host
from pydense.core.exceptions import ConfigurationError
from pydense.core.pipeline import ResolvedConfig
from pydense.core.protocols import StridedOperand


def _block(rows: int, cols: int, trans: str) -> tuple[int, int]:
    return (cols, rows) if trans != 'N' else (rows, cols)


def _op(X: Any, trans: str) -> Any:
    if trans == 'N':
        return X
    if trans == 'T':
        return X.T
    return X.conj().T


def _combine(update: Any, C: Any, beta: float | complex) -> Any:
    """update + beta * C, without reading C when beta == 0."""
    if beta == 0:
        return update
    return update + beta * C


def _triangle_mask(n: int, uplo: str, device: Any) -> Any:
    import torch

    ones = torch.ones((n, n), dtype=torch.bool, device=device)
    return torch.tril(ones) if uplo == 'L' else torch.triu(ones)


def _real_diagonal(X: Any) -> Any:
    import torch

    if not X.is_complex():
        return X
    X = X.clone()
    X.diagonal().copy_(torch.diagonal(X).real)
    return X


def _expand(A: Any, uplo: str, hermitian: bool) -> Any:
    """Full symmetric/Hermitian matrix from its stored triangle."""
    import torch

    if uplo == 'L':
        stored, strict = torch.tril(A), torch.tril(A, -1)
    else:
        stored, strict = torch.triu(A), torch.triu(A, 1)
    mirrored = strict.conj().T if hermitian else strict.T
    full = stored + mirrored
    return _real_diagonal(full) if hermitian else full


def _triangle(A: Any, uplo: str, unit: bool) -> Any:
    """Triangular matrix from its stored triangle, with a unit diagonal if asked."""
    import torch

    T = torch.tril(A) if uplo == 'L' else torch.triu(A)
    if unit:
        T = T.clone()
        T.diagonal().fill_(1)
    return T


class GPUBlasKernel:
    """
    Level-3 BLAS kernel on a PyTorch device.

    Provides the same routine table as CPUBlasKernel.
    """

    def __init__(self, device: str = 'cuda'):
        """
        Initialize the kernel.

        Args:
            device: Torch device ('cuda', 'cuda:N', or 'cpu' to run the
                torch code path on the host)
        """
        self.device = resolve_torch_device(device)
        self._routines: dict[str, Callable[..., int]] = {
            'gemm': self._gemm,
            'symm': partial(self._symm, hermitian=False),
            'hemm': partial(self._symm, hermitian=True),
            'syrk': partial(self._rank_k, hermitian=False),
            'herk': partial(self._rank_k, hermitian=True),
            'syr2k': partial(self._rank_2k, hermitian=False),
            'her2k': partial(self._rank_2k, hermitian=True),
            'trmm': self._trmm,
            'trsm': self._trsm,
        }

    @property
    def name(self) -> str:
        return f'{self.device.type}_torch'

    def get_routine(self, routine: str) -> Callable[..., int]:
        impl = self._routines.get(routine[1:])
        if routine[:1] not in ('d', 'z') or impl is None:
            raise ConfigurationError(f"kernel {self.name!r} does not provide {routine}")
        # real symmetric and Hermitian routines coincide
        if routine[0] == 'd' and routine[1:] in ('hemm', 'herk', 'her2k'):
            raise ConfigurationError(f"kernel {self.name!r} does not provide {routine}")
        return impl

    # === Routines ===

    def _gemm(self, config: ResolvedConfig,
              a: StridedOperand, b: StridedOperand, c: StridedOperand) -> int:
        m, n, k = config.m, config.n, config.k
        C_view = c.matrix(m, n)
        C = to_device(C_view, self.device)
        if k == 0:
            result = _combine(C.new_zeros(C.shape), C, config.beta)
        else:
            A = to_device(a.matrix(*_block(m, k, config.transA)), self.device)
            B = to_device(b.matrix(*_block(k, n, config.transB)), self.device)
            product = config.alpha * (_op(A, config.transA) @ _op(B, config.transB))
            result = _combine(product, C, config.beta)
        to_host(result, C_view)
        return 0

    def _symm(self, config: ResolvedConfig,
              a: StridedOperand, b: StridedOperand, c: StridedOperand, *, hermitian: bool) -> int:
        m, n = config.m, config.n
        order = m if config.side == 'L' else n
        A = _expand(to_device(a.matrix(order, order), self.device), config.uplo, hermitian)
        B = to_device(b.matrix(m, n), self.device)
        C_view = c.matrix(m, n)
        C = to_device(C_view, self.device)
        product = A @ B if config.side == 'L' else B @ A
        to_host(_combine(config.alpha * product, C, config.beta), C_view)
        return 0

    def _update_triangle(self, config: ResolvedConfig, update: Any, C: Any,
                         C_view: Any, hermitian: bool) -> None:
        import torch

        mask = _triangle_mask(config.n, config.uplo, self.device)
        result = torch.where(mask, _combine(update, C, config.beta), C)
        if hermitian:
            result = _real_diagonal(result)
        to_host(result, C_view)

    def _rank_k(self, config: ResolvedConfig,
                a: StridedOperand, c: StridedOperand, *, hermitian: bool) -> int:
        n, k = config.n, config.k
        C_view = c.matrix(n, n)
        C = to_device(C_view, self.device)
        if k == 0:
            update = C.new_zeros(C.shape)
        else:
            A = to_device(a.matrix(*_block(n, k, config.trans)), self.device)
            adjoint = 'C' if hermitian else 'T'
            if config.trans == 'N':
                product = A @ _op(A, adjoint)
            else:
                product = _op(A, adjoint) @ A
            update = config.alpha * product
        self._update_triangle(config, update, C, C_view, hermitian)
        return 0

    def _rank_2k(self, config: ResolvedConfig,
                 a: StridedOperand, b: StridedOperand, c: StridedOperand, *, hermitian: bool) -> int:
        n, k = config.n, config.k
        C_view = c.matrix(n, n)
        C = to_device(C_view, self.device)
        if k == 0:
            update = C.new_zeros(C.shape)
        else:
            A = to_device(a.matrix(*_block(n, k, config.trans)), self.device)
            B = to_device(b.matrix(*_block(n, k, config.trans)), self.device)
            adjoint = 'C' if hermitian else 'T'
            alpha = config.alpha
            second = alpha.conjugate() if hermitian else alpha
            if config.trans == 'N':
                update = alpha * (A @ _op(B, adjoint)) + second * (B @ _op(A, adjoint))
            else:
                update = alpha * (_op(A, adjoint) @ B) + second * (_op(B, adjoint) @ A)
        self._update_triangle(config, update, C, C_view, hermitian)
        return 0

    def _trmm(self, config: ResolvedConfig, a: StridedOperand, b: StridedOperand) -> int:
        m, n = config.m, config.n
        order = m if config.side == 'L' else n
        T = _triangle(to_device(a.matrix(order, order), self.device), config.uplo, config.diag == 'U')
        B_view = b.matrix(m, n)
        B = to_device(B_view, self.device)
        opT = _op(T, config.transA)
        product = opT @ B if config.side == 'L' else B @ opT
        to_host(config.alpha * product, B_view)
        return 0

    def _trsm(self, config: ResolvedConfig, a: StridedOperand, b: StridedOperand) -> int:
        import torch

        m, n = config.m, config.n
        order = m if config.side == 'L' else n
        T = _triangle(to_device(a.matrix(order, order), self.device), config.uplo, config.diag == 'U')
        B_view = b.matrix(m, n)
        B = to_device(B_view, self.device)
        opT = _op(T, config.transA).resolve_conj()
        # transposing swaps which triangle holds the entries
        upper = (config.uplo == 'U') != (config.transA != 'N')
        X = torch.linalg.solve_triangular(
            opT, config.alpha * B, upper=upper, left=config.side == 'L',
            unitriangular=config.diag == 'U',
        )
        to_host(X, B_view)
        return 0
