"""
Test the fitting engine directly, independent of the Regression model.
"""

import numpy as np
import pytest

from pymlr import (
    DecompositionError,
    DimensionError,
    FitResult,
    TooManyVariablesError,
    fit_regression,
)
from pymlr._backends.base import BackendBase, QRDecomposition
from pymlr._core import back_substitute


class FailingBackend(BackendBase):
    name = "failing"

    def qr(self, X):
        raise np.linalg.LinAlgError("simulated LAPACK failure")

    def get_device_info(self):
        return {'backend': 'failing'}


class TruncatingBackend(BackendBase):
    name = "truncating"

    def qr(self, X):
        return QRDecomposition(Q=np.eye(2), R=np.eye(2))

    def get_device_info(self):
        return {'backend': 'truncating'}


def test_back_substitute():
    R = np.array([
        [2.0, 1.0, 1.0],
        [0.0, 1.0, 3.0],
        [0.0, 0.0, 4.0],
    ])
    c_true = np.array([1.0, -2.0, 0.5])
    np.testing.assert_allclose(back_substitute(R, R @ c_true), c_true)


def test_back_substitute_zero_pivot_is_not_an_error():
    R = np.array([[1.0, 1.0], [0.0, 0.0]])
    c = back_substitute(R, np.array([1.0, 1.0]))
    assert np.isinf(c[1])


def test_exact_line():
    x = np.arange(6, dtype=float)
    result = fit_regression(x.reshape(-1, 1), 3 + 2 * x)

    assert isinstance(result, FitResult)
    np.testing.assert_allclose(result.coefficients, [3, 2], atol=1e-12)
    np.testing.assert_allclose(result.residuals, 0, atol=1e-12)
    assert result.r2 == pytest.approx(1.0)
    assert result.n_obs == 6


def test_population_variance():
    x = np.array([[1.0], [2.0], [3.0], [4.0]])
    y = np.array([1.0, 3.0, 2.0, 5.0])
    result = fit_regression(x, y)

    assert result.variance_observed == pytest.approx(np.var(y))
    assert result.variance_predicted == pytest.approx(np.var(result.predicted))
    assert result.r2 == pytest.approx(result.variance_predicted / result.variance_observed)


def test_coefficient_count():
    rng = np.random.default_rng(42)
    X = rng.standard_normal((30, 5))
    y = X @ np.array([1.0, -1.0, 0.5, 2.0, 0.0]) + 0.1 * rng.standard_normal(30)
    result = fit_regression(X, y)

    assert result.coefficients.shape == (6,)
    expected, *_ = np.linalg.lstsq(np.column_stack([np.ones(30), X]), y, rcond=None)
    np.testing.assert_allclose(result.coefficients, expected, rtol=1e-10, atol=1e-12)


def test_exactly_determined_is_allowed():
    result = fit_regression([[0.0], [1.0]], [1.0, 3.0])
    np.testing.assert_allclose(result.coefficients, [1, 2], atol=1e-12)


def test_under_determined():
    with pytest.raises(TooManyVariablesError):
        fit_regression([[0.0, 1.0], [1.0, 0.0]], [1.0, 2.0])


def test_length_mismatch():
    with pytest.raises(DimensionError):
        fit_regression([[0.0], [1.0], [2.0]], [1.0, 2.0])


def test_nan_propagates():
    result = fit_regression([[0.0], [1.0], [np.nan], [3.0]], [1.0, 2.0, 3.0, 4.0])
    assert np.isnan(result.coefficients).any()


def test_backend_failure_is_chained():
    with pytest.raises(DecompositionError) as exc_info:
        fit_regression([[0.0], [1.0], [2.0]], [1.0, 2.0, 4.0], backend=FailingBackend())
    assert exc_info.value.backend == "failing"
    assert isinstance(exc_info.value.__cause__, np.linalg.LinAlgError)


def test_backend_wrong_shapes():
    with pytest.raises(DecompositionError):
        fit_regression([[0.0], [1.0], [2.0]], [1.0, 2.0, 4.0], backend=TruncatingBackend())
