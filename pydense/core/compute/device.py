"""
Hardware detection for kernel selection.

Decides where a kernel should run when the caller asks for 'gpu' or
'auto' instead of passing a kernel instance.
"""

from dataclasses import dataclass, replace
from typing import Literal
import platform
import warnings


@dataclass(frozen=True)
class DeviceInfo:
    """
    Information about a compute device.

    Attributes:
        device_type: Type of device ('cpu', 'cuda', 'mps')
        device_index: Device index (None for CPU)
        name: Human-readable device name
        supports_fp64: Whether the device computes in double precision
        notice: Why this device was chosen over the preferred one, if it was
    """
    device_type: Literal['cpu', 'cuda', 'mps']
    device_index: int | None
    name: str
    supports_fp64: bool
    notice: str | None = None

    def __str__(self) -> str:
        if self.device_type == 'cpu':
            return f"CPU ({self.name})"
        return f"{self.device_type.upper()}:{self.device_index} ({self.name})"

    @property
    def is_gpu(self) -> bool:
        """True if this is a GPU device."""
        return self.device_type in ('cuda', 'mps')

    @property
    def torch_device(self) -> str:
        """Device string understood by torch.device()."""
        if self.device_type == 'cuda':
            return f"cuda:{self.device_index}"
        return self.device_type


def detect_gpu() -> DeviceInfo | None:
    """
    Detect available GPU, if any.

    Returns:
        DeviceInfo for the best available GPU, or None if no GPU available.

    Priority: CUDA > MPS (Apple Silicon)

    Note:
        torch is imported lazily so the CPU path never pays for it.
    """
    try:
        import torch
    except ImportError:
        return None

    if torch.cuda.is_available():
        idx = torch.cuda.current_device()
        return DeviceInfo(
            device_type='cuda',
            device_index=idx,
            name=torch.cuda.get_device_name(idx),
            supports_fp64=True,
        )

    if hasattr(torch.backends, 'mps') and torch.backends.mps.is_available():
        return DeviceInfo(
            device_type='mps',
            device_index=0,
            name='Apple Silicon GPU',
            supports_fp64=False,  # MPS has no float64
        )

    return None


def get_cpu_info() -> DeviceInfo:
    """DeviceInfo for the host CPU."""
    processor = platform.processor()
    if not processor:
        processor = platform.machine() or "Unknown CPU"

    return DeviceInfo(
        device_type='cpu',
        device_index=None,
        name=processor,
        supports_fp64=True,
    )


def select_device(prefer: Literal['cpu', 'gpu', 'auto'] = 'auto') -> DeviceInfo:
    """
    Select compute device based on preference and availability.

    Args:
        prefer: Device preference
            - 'cpu': Always use CPU
            - 'gpu': Require a double-precision GPU (raises if unavailable)
            - 'auto': Use a double-precision GPU if available, else CPU

    Returns:
        DeviceInfo for selected device

    Raises:
        RuntimeError: If 'gpu' requested but no suitable GPU available
    """
    if prefer == 'cpu':
        return get_cpu_info()

    gpu = detect_gpu()
    usable = gpu if gpu is not None and gpu.supports_fp64 else None

    if prefer == 'gpu':
        if usable is None:
            found = f" (found {gpu}, which lacks float64)" if gpu is not None else ""
            raise RuntimeError(
                "GPU kernel requested but no double-precision GPU available"
                f"{found}. Ensure PyTorch is installed with CUDA support."
            )
        return usable

    if usable is not None:
        return usable
    if gpu is not None:
        notice = f"{gpu} does not support float64, using CPU"
        warnings.warn(notice)
        return replace(get_cpu_info(), notice=notice)
    return get_cpu_info()
