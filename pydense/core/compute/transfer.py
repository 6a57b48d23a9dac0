"""
Host/device transfer for the PyTorch kernels.

torch is imported inside each function so that importing pydense never
requires it; only constructing a PyTorch kernel does.
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray


def resolve_torch_device(device: str) -> Any:
    """
    Validate a device string and return the torch.device.

    Args:
        device: 'cpu', 'cuda', 'cuda:N' or 'mps'

    Raises:
        RuntimeError: If the device is unavailable or lacks float64
        ValueError: If the device string is not recognized
    """
    import torch

    if device.startswith('cuda'):
        if not torch.cuda.is_available():
            raise RuntimeError(
                "CUDA not available. Install PyTorch with CUDA support, "
                "or use kernel='cpu'."
            )
        return torch.device(device)

    if device == 'mps':
        raise RuntimeError(
            "MPS does not support float64. Use kernel='cpu' for double precision."
        )

    if device == 'cpu':
        return torch.device('cpu')

    raise ValueError(f"Unknown device: {device!r}. Use 'cpu', 'cuda' or 'cuda:N'.")


def to_device(view: NDArray[Any], device: Any) -> Any:
    """Copy a (possibly strided) host view into a contiguous device tensor."""
    import torch

    return torch.from_numpy(np.ascontiguousarray(view)).to(device)


def to_host(tensor: Any, view: NDArray[Any]) -> None:
    """Write a device tensor back through a host view."""
    view[...] = tensor.resolve_conj().detach().cpu().numpy()
