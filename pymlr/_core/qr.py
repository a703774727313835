"""
QR decomposition without pivoting.

Backend-agnostic interface to QR factorization.
"""

import numpy as np

from ..exceptions import DecompositionError
from .._backends.base import QRDecomposition


def qr_decomposition(X: np.ndarray, backend=None) -> QRDecomposition:
    """
    QR decomposition of a design matrix.

    Delegates to backend-specific implementation.

    Parameters
    ----------
    X : ndarray, shape (n, p)
        Matrix to decompose
    backend : Backend, optional
        Computational backend

    Returns
    -------
    result : QRDecomposition
        Reduced factorization with ``Q @ R == X``

    Raises
    ------
    DecompositionError
        If the backend cannot factorize X. The backend's exception is
        chained as the cause.
    """
    if backend is None:
        from .._backends import get_backend
        backend = get_backend('cpu')

    try:
        result = backend.qr(X)
    except (np.linalg.LinAlgError, ValueError, RuntimeError) as e:
        raise DecompositionError(
            f"QR decomposition failed on {backend.name}: {e}",
            backend=backend.name,
        ) from e

    n, p = np.shape(X)
    if result.Q.shape != (n, p) or result.R.shape != (p, p):
        raise DecompositionError(
            f"{backend.name} returned Q {result.Q.shape} and R {result.R.shape} "
            f"for a {n}x{p} matrix",
            backend=backend.name,
        )
    return result
