"""
Shared compute infrastructure for PyDense.

Submodules:
    device: Hardware detection for kernel selection
    timing: Stage timing for dispatched calls
    tolerances: Tolerance tiers for comparing kernels
"""

from pydense.core.compute.device import (
    DeviceInfo,
    detect_gpu,
    get_cpu_info,
    select_device,
)
from pydense.core.compute.timing import Timer

__all__ = [
    # Device detection
    "DeviceInfo",
    "detect_gpu",
    "get_cpu_info",
    "select_device",
    # Timing
    "Timer",
]
