"""
CPU backend using NumPy + SciPy.

This is the reference backend; all others are checked against it.
"""

import logging

import numpy as np
from scipy.linalg import qr

from .base import BackendBase, QRDecomposition

logger = logging.getLogger(__name__)


class CPUBackendFP64(BackendBase):
    """
    CPU backend using LAPACK Householder QR through SciPy.

    Always uses FP64 precision. Inputs are not screened for NaN or Inf:
    non-finite values flow through the factorization like any other IEEE
    value.
    """

    def __init__(self):
        self.name = "cpu_fp64"
        self.precision = "fp64"

    def qr(self, X: np.ndarray) -> QRDecomposition:
        X_work = np.asarray(X, dtype=np.float64)
        logger.debug("cpu qr on %s matrix", X_work.shape)
        Q, R = qr(X_work, mode='economic', check_finite=False)
        return QRDecomposition(Q=Q, R=R)

    def get_device_info(self) -> dict:
        """Get backend information."""
        import scipy
        return {
            'backend': 'cpu',
            'precision': 'fp64',
            'library': f'NumPy {np.__version__}, SciPy {scipy.__version__}',
        }
