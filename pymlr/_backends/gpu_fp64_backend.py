"""
GPU backend using PyTorch with FP64 precision.

For data center GPUs: A100, H100, V100.
"""

import logging
import warnings
from typing import Optional

import numpy as np

from .base import BackendBase, QRDecomposition

logger = logging.getLogger(__name__)


class PyTorchBackendFP64(BackendBase):
    """
    PyTorch backend with FP64 precision.

    Runs the QR factorization on CUDA when a device is present and falls
    back to PyTorch's CPU kernels otherwise. Apple Metal has no FP64 and
    is rejected.
    """

    def __init__(self, device: Optional[str] = None):
        """Initialize PyTorch FP64 backend."""
        self.name = "pytorch_fp64"
        self.precision = "fp64"

        try:
            import torch
            self.torch = torch
        except ImportError:
            raise ImportError(
                "PyTorch required for GPU backend. "
                "Install: pip install pymlr[gpu]"
            )

        if device == 'mps':
            raise RuntimeError(
                "FP64 not supported on Apple Metal. "
                "Use the CPU backend."
            )

        if device is None:
            if torch.cuda.is_available():
                device = 'cuda'
            else:
                warnings.warn("No CUDA GPU available, using CPU")
                device = 'cpu'

        self.device = torch.device(device)

        if self.device.type == 'cuda':
            from .precision_detector import detect_gpu_capabilities, PrecisionSupport
            caps = detect_gpu_capabilities()
            if caps.fp64_support == PrecisionSupport.GIMPED_FP64:
                warnings.warn(
                    f"Using FP64 on {caps.gpu_name} with gimped FP64 support. "
                    f"This will be ~{int(1/caps.fp64_throughput_ratio)}x slower than FP32.",
                    UserWarning
                )

    def qr(self, X: np.ndarray) -> QRDecomposition:
        torch = self.torch
        X_gpu = torch.from_numpy(np.ascontiguousarray(X, dtype=np.float64)).to(self.device)
        logger.debug("torch qr on %s matrix, device %s", tuple(X_gpu.shape), self.device)

        Q, R = torch.linalg.qr(X_gpu, mode='reduced')

        return QRDecomposition(
            Q=Q.cpu().numpy(),
            R=R.cpu().numpy(),
        )

    def get_device_info(self) -> dict:
        """Get backend information."""
        return {
            'backend': 'gpu',
            'precision': 'fp64',
            'device': str(self.device),
            'library': f'PyTorch {self.torch.__version__}',
        }
