"""
pymlr: multiple linear regression with feature crosses.

Least squares by QR decomposition, with R-squared, residuals and
prediction, as an embeddable component.
"""

import logging

__version__ = "1.0.0"

# Import main user-facing API
from .regression import Regression
from .datapoint import DataPoint, make_data_points
from .crosses import (
    FeatureCross,
    PowerCross,
    InteractionCross,
    register_cross,
    pow_cross,
    multiply_cross,
)
from .exceptions import (
    RegressionError,
    NotEnoughDataError,
    TooManyVariablesError,
    AlreadyRunError,
    NotFittedError,
    DecompositionError,
    ValidationError,
    DimensionError,
)
from ._core import fit_regression, FitResult

# Import backend utilities (for advanced users)
from ._backends import get_backend, list_available_backends

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    'Regression',
    'DataPoint',
    'make_data_points',
    'FeatureCross',
    'PowerCross',
    'InteractionCross',
    'register_cross',
    'pow_cross',
    'multiply_cross',
    'fit_regression',
    'FitResult',
    'RegressionError',
    'NotEnoughDataError',
    'TooManyVariablesError',
    'AlreadyRunError',
    'NotFittedError',
    'DecompositionError',
    'ValidationError',
    'DimensionError',
    'get_backend',
    'list_available_backends',
]
