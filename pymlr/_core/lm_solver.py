"""
Linear model solver.

Pure function from a post-cross variable table and observations to
coefficients and fit statistics. The backend only supplies the QR
factorization; back-substitution and statistics happen here.
"""

import logging
import warnings
from dataclasses import dataclass

import numpy as np

from .._utils import check_table, check_vector
from ..exceptions import DimensionError, TooManyVariablesError
from .qr import qr_decomposition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FitResult:
    """Coefficients and goodness-of-fit statistics of one fit."""
    coefficients: np.ndarray       # Intercept first, shape (k + 1,)
    predicted: np.ndarray          # Fitted values, shape (n,)
    residuals: np.ndarray          # predicted - observed, shape (n,)
    variance_observed: float       # Population variance (divide by n)
    variance_predicted: float
    r2: float                      # variance_predicted / variance_observed

    @property
    def n_obs(self) -> int:
        return len(self.predicted)


def back_substitute(R: np.ndarray, qty: np.ndarray) -> np.ndarray:
    """
    Solve ``R c = qty`` for upper triangular R.

    Coefficients are resolved from the last to the first, each one using
    the already-resolved coefficients after it. Zero pivots are divided
    through as-is and yield inf or nan.
    """
    p = R.shape[1]
    c = np.zeros(p, dtype=np.float64)
    with np.errstate(divide='ignore', invalid='ignore'):
        for i in range(p - 1, -1, -1):
            c[i] = qty[i]
            for j in range(i + 1, p):
                c[i] -= c[j] * R[i, j]
            c[i] /= R[i, i]
    return c


def fit_regression(variables, observed, backend=None) -> FitResult:
    """
    Fit an ordinary least squares model with intercept.

    Parameters
    ----------
    variables : array-like, shape (n, k)
        Explanatory variables after feature crosses (WITHOUT intercept)
    observed : array-like, shape (n,)
        Observed values
    backend : Backend, optional
        Computational backend for the QR step

    Returns
    -------
    FitResult
        Coefficients and statistics

    Raises
    ------
    TooManyVariablesError
        If n < k + 1
    DimensionError
        If the variable table is ragged or does not match ``observed``
    DecompositionError
        If the backend fails to factorize the design matrix
    """
    X = check_table(variables, name='variables')
    y = check_vector(observed, name='observed')

    n, k = X.shape
    if len(y) != n:
        raise DimensionError(
            f"observed has {len(y)} values but variables has {n} rows"
        )
    if n < k + 1:
        raise TooManyVariablesError(
            f"not enough observations to support this many variables: "
            f"{n} observations, {k} variables",
            n_observations=n,
            n_variables=k,
        )

    # Add intercept
    design = np.column_stack([np.ones(n), X])
    logger.debug("design matrix %s", design.shape)

    qr_result = qr_decomposition(design, backend=backend)

    qty = qr_result.Q.T @ y
    coef = back_substitute(qr_result.R, qty)

    with np.errstate(all='ignore'):
        predicted = design @ coef
        residuals = predicted - y
        variance_observed, variance_predicted, r2 = _variance_ratio(y, predicted)

    logger.info("fit %d observations on %d variables, R2=%.4f", n, k, r2)
    return FitResult(
        coefficients=coef,
        predicted=predicted,
        residuals=residuals,
        variance_observed=variance_observed,
        variance_predicted=variance_predicted,
        r2=r2,
    )


def _variance_ratio(observed: np.ndarray, predicted: np.ndarray):
    """Population variances of observed and predicted values and their ratio."""
    n = len(observed)
    ob_mean = np.sum(observed) / n
    pr_mean = np.sum(predicted) / n

    var_ob = float(np.sum((observed - ob_mean) ** 2) / n)
    var_pr = float(np.sum((predicted - pr_mean) ** 2) / n)

    r2 = float(np.float64(var_pr) / np.float64(var_ob))
    if not np.isfinite(r2):
        warnings.warn(
            f"R2 is {r2} (variance observed = {var_ob}, "
            f"variance predicted = {var_pr})",
            RuntimeWarning,
        )
    return var_ob, var_pr, r2
