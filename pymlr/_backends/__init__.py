"""
Backend selection and management.

Provides a unified QR interface over SciPy (CPU) and PyTorch (CUDA).
"""

from .base import BackendBase, QRDecomposition
from .cpu_fp64_backend import CPUBackendFP64
from .precision_detector import (
    detect_gpu_capabilities,
    torch_available,
    GPUCapabilities,
)

PYTORCH_AVAILABLE = torch_available()

BACKEND_NAMES = ('auto', 'cpu', 'gpu', 'pytorch')


def get_backend(backend: str = 'cpu') -> BackendBase:
    """
    Get computational backend.

    Parameters
    ----------
    backend : str
        Backend selection:
        - 'cpu': SciPy/LAPACK QR (FP64, the default)
        - 'auto': PyTorch on a full-FP64 CUDA GPU if present, else CPU
        - 'gpu' or 'pytorch': Force PyTorch FP64

    Returns
    -------
    BackendBase
        Backend instance

    Examples
    --------
    >>> backend = get_backend('cpu')
    >>> backend.name
    'cpu_fp64'
    """
    if backend == 'cpu':
        return CPUBackendFP64()

    if backend == 'auto':
        if PYTORCH_AVAILABLE and detect_gpu_capabilities().recommended:
            from .gpu_fp64_backend import PyTorchBackendFP64
            return PyTorchBackendFP64()
        return CPUBackendFP64()

    if backend in ('gpu', 'pytorch'):
        if not PYTORCH_AVAILABLE:
            raise RuntimeError(
                "PyTorch backend unavailable.\n"
                "Install: pip install pymlr[gpu]"
            )
        from .gpu_fp64_backend import PyTorchBackendFP64
        return PyTorchBackendFP64()

    raise ValueError(
        f"Unknown backend: '{backend}'\n"
        f"Valid options: {', '.join(repr(b) for b in BACKEND_NAMES)}"
    )


def list_available_backends() -> list:
    """List names of available backends."""
    backends = ['cpu']
    if PYTORCH_AVAILABLE:
        backends.append('pytorch')
    return backends


__all__ = [
    'get_backend',
    'list_available_backends',
    'BackendBase',
    'QRDecomposition',
    'CPUBackendFP64',
    'detect_gpu_capabilities',
    'GPUCapabilities',
    'PYTORCH_AVAILABLE',
]
