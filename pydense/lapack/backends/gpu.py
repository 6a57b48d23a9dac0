"""
PyTorch kernel for the LAPACK general solver.

Uses torch.linalg.lu_factor_ex, which reports singularity through its
info tensor rather than raising, so the status contract matches LAPACK.
torch pivots are 1-based; they are converted to the 0-based convention of
the CPU kernel.
"""

from typing import Any, Callable

from numpy.typing import NDArray

from pydense.core.compute.transfer import resolve_torch_device, to_device, to_host
from pydense.core.exceptions import ConfigurationError
from pydense.core.pipeline import ResolvedConfig
from pydense.core.protocols import StridedOperand
from pydense.lapack.backends.cpu import ROUTINES


class GPULapackKernel:
    """dgesv/zgesv on a PyTorch device."""

    def __init__(self, device: str = 'cuda'):
        self.device = resolve_torch_device(device)

    @property
    def name(self) -> str:
        return f'{self.device.type}_torch'

    def get_routine(self, routine: str) -> Callable[..., int]:
        if routine not in ROUTINES:
            raise ConfigurationError(f"kernel {self.name!r} does not provide {routine}")
        return self._gesv

    def _gesv(self, config: ResolvedConfig,
              a: StridedOperand, b: StridedOperand, ipiv: NDArray[Any]) -> int:
        import torch

        n, nrhs = config.n, config.nrhs
        A_view = a.matrix(n, n)
        B_view = b.matrix(n, nrhs)
        A = to_device(A_view, self.device)
        B = to_device(B_view, self.device)

        LU, pivots, info = torch.linalg.lu_factor_ex(A)
        status = int(info.item())
        if status < 0:
            return status

        to_host(LU, A_view)
        ipiv[:n] = (pivots - 1).cpu().numpy()
        if status == 0:
            to_host(torch.linalg.lu_solve(LU, pivots, B), B_view)
        return status
