"""
Hardware FP64 capability detection.

Every fit runs in double precision, so a GPU is only worth using when it
has real FP64 throughput.
"""

import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class PrecisionSupport(Enum):
    """FP64 support level for hardware."""
    NO_GPU = "no_gpu"            # No CUDA GPU available
    GIMPED_FP64 = "gimped_fp64"  # FP64 exists but slow (consumer NVIDIA)
    FULL_FP64 = "full_fp64"      # Full-speed FP64 (A100, H100)


@dataclass
class GPUCapabilities:
    """
    GPU capability information.

    Attributes
    ----------
    has_gpu : bool
        Whether a CUDA GPU is available
    gpu_name : str
        Human-readable GPU name
    fp64_support : PrecisionSupport
        Level of FP64 support
    fp64_throughput_ratio : float
        Ratio of FP64 to FP32 throughput
    """
    has_gpu: bool
    gpu_name: str
    fp64_support: PrecisionSupport
    fp64_throughput_ratio: float

    @property
    def recommended(self) -> bool:
        """Whether the GPU should be preferred over the CPU backend."""
        return self.fp64_support == PrecisionSupport.FULL_FP64


def torch_available() -> bool:
    """True when PyTorch can be imported."""
    try:
        import torch  # noqa: F401
    except ImportError:
        return False
    return True


def detect_gpu_capabilities() -> GPUCapabilities:
    """
    Detect CUDA hardware and FP64 capabilities.

    Returns
    -------
    GPUCapabilities
        Detected hardware capabilities
    """
    cuda_caps = _detect_cuda_capabilities()
    if cuda_caps is not None:
        return cuda_caps

    return GPUCapabilities(
        has_gpu=False,
        gpu_name="CPU only",
        fp64_support=PrecisionSupport.NO_GPU,
        fp64_throughput_ratio=1.0,
    )


def _detect_cuda_capabilities() -> Optional[GPUCapabilities]:
    """Detect NVIDIA CUDA GPU capabilities."""
    try:
        import torch
    except ImportError:
        return None

    if not torch.cuda.is_available():
        return None

    gpu_name = torch.cuda.get_device_name(0)
    support, ratio = _classify_nvidia_gpu(gpu_name)

    return GPUCapabilities(
        has_gpu=True,
        gpu_name=gpu_name,
        fp64_support=support,
        fp64_throughput_ratio=ratio,
    )


def _classify_nvidia_gpu(gpu_name: str) -> tuple[PrecisionSupport, float]:
    """
    Classify NVIDIA GPU FP64 capabilities.

    Parameters
    ----------
    gpu_name : str
        GPU name from torch.cuda.get_device_name()

    Returns
    -------
    (support_level, throughput_ratio)
    """
    gpu_upper = gpu_name.upper()

    full_fp64_models = ['A100', 'A800', 'H100', 'H800', 'V100', 'P100']
    for model in full_fp64_models:
        if model in gpu_upper:
            return PrecisionSupport.FULL_FP64, 0.5

    # RTX 30/40/50 series - 1/64 ratio
    for series in ('RTX 50', 'RTX 40', 'RTX 30'):
        if series in gpu_upper:
            return PrecisionSupport.GIMPED_FP64, 1/64

    # RTX 20 and GTX - 1/32 ratio
    if 'RTX 20' in gpu_upper or 'GTX' in gpu_upper:
        return PrecisionSupport.GIMPED_FP64, 1/32

    warnings.warn(
        f"Unknown NVIDIA GPU '{gpu_name}'. Assuming gimped FP64."
    )
    return PrecisionSupport.GIMPED_FP64, 1/32
