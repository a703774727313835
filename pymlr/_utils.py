"""
Utility functions.
"""

import numpy as np

from .exceptions import DimensionError


def check_table(X, name='X', dtype=np.float64):
    """Convert a rectangular table to a 2-D float array."""
    try:
        X = np.asarray(X, dtype=dtype)
    except ValueError as e:
        raise DimensionError(f"{name} must be rectangular: {e}") from e
    if X.ndim == 1 and X.size == 0:
        X = X.reshape(0, 0)
    if X.ndim != 2:
        raise DimensionError(f"{name} must be 2-dimensional, got shape {X.shape}")
    return X


def check_vector(y, name='y', dtype=np.float64):
    """Validate vector input."""
    y = np.asarray(y, dtype=dtype)
    if y.ndim != 1:
        raise DimensionError(f"{name} must be 1-dimensional")
    return y
