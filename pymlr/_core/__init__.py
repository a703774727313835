"""
Core algorithms (backend-agnostic).
"""

from .qr import qr_decomposition
from .lm_solver import FitResult, back_substitute, fit_regression
from .expansion import apply_crosses, extend_names

__all__ = [
    "qr_decomposition",
    "FitResult",
    "back_substitute",
    "fit_regression",
    "apply_crosses",
    "extend_names",
]
