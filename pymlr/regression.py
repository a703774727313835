"""
Multiple linear regression with feature crosses.

This is the user-facing API: accumulate data points, register crosses,
run the fit, then inspect coefficients or predict.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Sequence, Union

import numpy as np
import pandas as pd

from ._core import apply_crosses, extend_names, fit_regression, FitResult
from .crosses import FeatureCross
from .datapoint import DataPoint
from .exceptions import (
    AlreadyRunError,
    DimensionError,
    NotEnoughDataError,
    NotFittedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# A multi-variable fit needs at least this many points
MIN_DATA_POINTS = 3


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(stamp: datetime) -> datetime:
    """Naive datetimes are taken to be UTC."""
    if stamp.tzinfo is None:
        return stamp.replace(tzinfo=timezone.utc)
    return stamp


class Regression:
    """
    Multiple linear regression model.

    Holds the training data, variable names, registered feature crosses
    and the results of the latest fit.

    Each fit is a full batch solve by QR decomposition. A model is run
    once per training generation; a new generation starts when
    ``reset()`` is called or, if ``min_retrain_interval`` is set, once
    that interval has elapsed since the last fit.

    The model is not thread-safe. Callers that train or add crosses from
    one thread while running or predicting from another must hold a lock
    around the whole model.

    Examples
    --------
    >>> from pymlr import Regression, DataPoint, PowerCross
    >>> r = Regression()
    >>> r.set_observed("Input-Squared plus Input")
    >>> r.set_var(0, "Input")
    >>> r.train(DataPoint(6, [2]), DataPoint(20, [4]), DataPoint(30, [5]),
    ...         DataPoint(72, [8]), DataPoint(156, [12]))
    >>> r.add_cross(PowerCross(0, 2))
    >>> r.run()
    >>> round(r.predict([6]), 4)
    42.0
    """

    def __init__(
        self,
        backend: str = 'cpu',
        min_retrain_interval: Optional[Union[timedelta, float]] = None,
    ):
        """
        Parameters
        ----------
        backend : str
            QR backend name passed to ``get_backend``: 'cpu', 'auto', 'gpu'
        min_retrain_interval : timedelta or float, optional
            Minimum time between fits before a new training generation
            may start without ``reset()``. Floats are seconds.
        """
        self.observed_name = ""
        self.var_names: Dict[int, str] = {}
        self.data: List[DataPoint] = []
        self.crosses: List[FeatureCross] = []

        self.coefficients: Dict[int, float] = {}
        self.variance_observed = 0.0
        self.variance_predicted = 0.0
        self.r2 = 0.0
        self.formula = ""

        self.initialised = False
        self.has_run = False
        self.last_trained: Optional[datetime] = None
        self.min_retrain_interval: Optional[timedelta] = None
        self.backend = backend

        # Points [0, expanded) already carry their cross-derived variables
        self.expanded = 0

        if min_retrain_interval is not None:
            self.set_threshold(min_retrain_interval)

    @classmethod
    def from_frame(
        cls,
        data: pd.DataFrame,
        observed: str,
        variables: Optional[List[str]] = None,
        **kwargs,
    ) -> 'Regression':
        """
        Build a trained (not yet run) model from a DataFrame.

        Parameters
        ----------
        data : DataFrame
            One row per observation
        observed : str
            Column holding the observed values
        variables : list of str, optional
            Explanatory columns; defaults to all other columns in order
        **kwargs
            Passed to ``Regression``
        """
        if variables is None:
            variables = [c for c in data.columns if c != observed]

        model = cls(**kwargs)
        model.set_observed(str(observed))
        for i, name in enumerate(variables):
            model.set_var(i, str(name))

        obs_values = data[observed].to_numpy(dtype=np.float64)
        var_values = data[variables].to_numpy(dtype=np.float64)
        model.train(*(
            DataPoint(obs, row.tolist()) for obs, row in zip(obs_values, var_values)
        ))
        return model

    # ------------------------------------------------------------------
    # Names
    # ------------------------------------------------------------------

    def set_observed(self, name: str) -> None:
        """Set the name of the observed value."""
        self.observed_name = name

    def get_observed(self) -> str:
        """Get the name of the observed value."""
        return self.observed_name

    def set_var(self, i: int, name: str) -> None:
        """Set the name of variable i."""
        self.var_names[i] = name

    def get_var(self, i: int) -> str:
        """Get the name of variable i, ``"X<i>"`` when unnamed."""
        name = self.var_names.get(i, "")
        return name if name else f"X{i}"

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------

    def train(self, *points: DataPoint) -> None:
        """
        Add data points.

        Arity is not checked here; a mismatch surfaces when the model is
        run.
        """
        self.data.extend(points)
        if len(self.data) >= MIN_DATA_POINTS:
            self.initialised = True

    def add_cross(self, cross: FeatureCross) -> None:
        """Register a feature cross, applied at the next run."""
        if self.expanded:
            raise ValidationError(
                "feature crosses must be registered before the first run; "
                f"{self.expanded} data points are already expanded"
            )
        self.crosses.append(cross)

    def set_threshold(self, interval: Union[timedelta, float]) -> None:
        """Set the minimum retrain interval (timedelta or seconds)."""
        if not isinstance(interval, timedelta):
            interval = timedelta(seconds=float(interval))
        self.min_retrain_interval = interval

    def retrain_due(self, now: Optional[datetime] = None) -> bool:
        """True when the retrain interval has elapsed since the last fit."""
        if self.min_retrain_interval is None or self.last_trained is None:
            return False
        now = _as_utc(now or _utcnow())
        return now - _as_utc(self.last_trained) >= self.min_retrain_interval

    def reset(self) -> None:
        """
        Start a new training generation.

        Data, names and crosses are kept, as are the previous coefficients
        until the next run replaces them.
        """
        self.has_run = False

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    def _apply_crosses(self) -> None:
        """Expand every point not yet expanded, and name the new variables once."""
        if not self.crosses:
            self.expanded = len(self.data)
            return

        pending = self.data[self.expanded:]
        if self.expanded == 0:
            arity = len(self.data[0].variables)
            for i, point in enumerate(pending):
                if len(point.variables) != arity:
                    raise DimensionError(
                        f"data point {i} has {len(point.variables)} variables, "
                        f"expected {arity}"
                    )

        # Nothing is stored until every pending point expands
        try:
            expanded = [apply_crosses(point.variables, self.crosses) for point in pending]
        except IndexError as e:
            raise DimensionError(
                "a data point is too short for the registered crosses"
            ) from e

        if self.expanded:
            arity = len(self.data[0].variables)
            for i, variables in enumerate(expanded, start=self.expanded):
                if len(variables) != arity:
                    raise DimensionError(
                        f"data point {i} has {len(variables)} variables after "
                        f"crosses, expected {arity}"
                    )
        else:
            start = len(self.data[0].variables)
            self.var_names = extend_names(self.var_names, self.crosses, start)

        for point, variables in zip(pending, expanded):
            point.variables = variables
        self.expanded = len(self.data)

    def run(self, log_output: bool = False) -> None:
        """
        Fit the model.

        Applies feature crosses to any new data points, solves the least
        squares system by QR decomposition and stores coefficients,
        per-point predictions and fit statistics.

        Parameters
        ----------
        log_output : bool
            Also render ``formula``

        Raises
        ------
        NotEnoughDataError
            Fewer than three data points
        AlreadyRunError
            Already run this training generation
        TooManyVariablesError
            Fewer observations than variables + 1 after crosses
        DecompositionError
            The QR backend failed
        """
        if not self.initialised:
            raise NotEnoughDataError("not enough data points")

        if self.has_run:
            if not self.retrain_due():
                raise AlreadyRunError("regression has already been run")
            logger.info("retrain interval elapsed, starting a new training generation")
            self.has_run = False

        self._apply_crosses()

        from ._backends import get_backend
        result = fit_regression(
            [point.variables for point in self.data],
            [point.observed for point in self.data],
            backend=get_backend(self.backend),
        )
        self._store(result, log_output)

    def _store(self, result: FitResult, log_output: bool) -> None:
        """Write a fit result back onto the model and its data points."""
        self.coefficients = {i: float(c) for i, c in enumerate(result.coefficients)}

        for point, predicted, residual in zip(self.data, result.predicted, result.residuals):
            point.predicted = float(predicted)
            point.residual = float(residual)

        self.variance_observed = result.variance_observed
        self.variance_predicted = result.variance_predicted
        self.r2 = result.r2

        if log_output:
            self.formula = self._render_formula()
            logger.info("%s", self.formula)

        self.has_run = True
        self.last_trained = _utcnow()

    def _render_formula(self) -> str:
        terms = [f"Predicted = {self.coeff(0):.4f}"]
        for i in range(1, len(self.coefficients)):
            terms.append(f"{self.get_var(i - 1)}*{self.coeff(i):.4f}")
        return " + ".join(terms)

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def coeff(self, i: int) -> float:
        """Coefficient i (0 is the intercept), 0.0 before any fit."""
        return self.coefficients.get(i, 0.0)

    @property
    def coef(self) -> pd.Series:
        """Named coefficients (pandas Series)."""
        index = ['Intercept'] + [self.get_var(i) for i in range(len(self.coefficients) - 1)]
        values = [self.coefficients[i] for i in range(len(self.coefficients))]
        return pd.Series(values, index=index[:len(values)], dtype=np.float64)

    def predict(self, variables: Sequence[float]) -> float:
        """
        Predict the observed value for one variable vector.

        Registered crosses are applied to a copy of ``variables``; the
        caller's sequence is not modified.

        Raises
        ------
        NotEnoughDataError
            Model not initialised
        NotFittedError
            No fit has produced coefficients yet
        DimensionError
            Vector too short for the fitted variables
        """
        if not self.initialised:
            raise NotEnoughDataError("not enough data points")
        if not self.coefficients:
            raise NotFittedError("regression has not been run")

        try:
            expanded = apply_crosses(variables, self.crosses)
        except IndexError as e:
            raise DimensionError(
                f"variable vector of length {len(variables)} is too short "
                f"for the registered crosses"
            ) from e
        k = len(self.data[0].variables)
        if len(expanded) < k:
            raise DimensionError(
                f"expected {k} variables after crosses, got {len(expanded)}"
            )

        p = self.coeff(0)
        for j in range(1, k + 1):
            p += self.coeff(j) * expanded[j - 1]
        return p

    def residuals_frame(self) -> pd.DataFrame:
        """Observed, predicted and residual values per data point."""
        return pd.DataFrame({
            'observed': [d.observed for d in self.data],
            'predicted': [d.predicted for d in self.data],
            'residual': [d.residual for d in self.data],
        })

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def save(self) -> bytes:
        """JSON-serialize the model."""
        from .io import dumps
        return dumps(self)

    def load(self, data: bytes) -> None:
        """Replace this model's state with serialized bytes."""
        from .io import loads
        self.__dict__.update(loads(data).__dict__)

    @classmethod
    def from_bytes(cls, data: bytes) -> 'Regression':
        from .io import loads
        return loads(data)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def summary(self):
        """Print a summary of the fit."""
        print()
        print("=" * 80)
        print("MULTIPLE LINEAR REGRESSION")
        print("=" * 80)
        print()
        print(f"Observed: {self.get_observed() or 'Y'}")
        print(f"Number of observations: {len(self.data)}")
        print()

        if not self.coefficients:
            print("Not run yet.")
            print("=" * 80)
            return

        print("Coefficients:")
        print("-" * 80)
        for name, value in self.coef.items():
            print(f"{name:<50} {value:>18.6f}")
        print("-" * 80)
        print()

        print("Residuals:")
        print(f"{'observed':>12} {'predicted':>12} {'residual':>12}")
        for d in self.data:
            if d.predicted is None:
                continue
            print(f"{d.observed:>12.4f} {d.predicted:>12.4f} {d.residual:>12.4f}")
        print()

        print(f"Variance observed:  {self.variance_observed:.4f}")
        print(f"Variance predicted: {self.variance_predicted:.4f}")
        print(f"R2:                 {self.r2:.4f}")
        print("=" * 80)
        print()

    def __str__(self):
        if not self.initialised:
            return "not enough data points"

        header = [self.get_observed()]
        header += [self.get_var(i) for i in range(len(self.var_names))]
        lines = ["|\t".join(header)]
        lines += [str(d) for d in self.data]
        lines.append("")
        lines.append(f"N = {len(self.data)}")
        lines.append(f"Variance observed = {self.variance_observed:.4f}")
        lines.append(f"Variance Predicted = {self.variance_predicted:.4f}")
        lines.append(f"R2 = {self.r2:.4f}")
        return "\n".join(lines) + "\n"

    def __repr__(self):
        return (
            f"Regression(n={len(self.data)}, crosses={len(self.crosses)}, "
            f"has_run={self.has_run}, R2={self.r2:.3f})"
        )
