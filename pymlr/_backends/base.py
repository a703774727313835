"""
Abstract base classes for backends.

A backend supplies one numerical primitive, the QR factorization of the
design matrix. Everything else in a fit happens in NumPy.
"""

from abc import ABC, abstractmethod
import numpy as np
from dataclasses import dataclass


@dataclass
class QRDecomposition:
    """Result of an unpivoted QR decomposition, ``Q @ R == X``."""
    Q: np.ndarray    # Orthonormal columns, shape (n, p)
    R: np.ndarray    # Upper triangular, shape (p, p)


class BackendBase(ABC):
    """Abstract base class for all backends."""

    name: str = "base"
    precision: str = "fp64"

    @abstractmethod
    def qr(self, X: np.ndarray) -> QRDecomposition:
        """
        Factorize X without column pivoting.

        Backends convert to their native types internally and hand back
        float64 NumPy arrays.

        Parameters
        ----------
        X : ndarray, shape (n, p)
            Design matrix (WITH intercept column), n >= p

        Returns
        -------
        QRDecomposition
            Reduced factorization: Q is (n, p), R is (p, p)
        """
        pass

    @abstractmethod
    def get_device_info(self) -> dict:
        """Get backend information."""
        pass

    def __repr__(self):
        return f"{type(self).__name__}(name={self.name!r})"
