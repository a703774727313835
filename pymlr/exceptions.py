"""
Exception hierarchy for pymlr.

All exceptions inherit from RegressionError so callers can catch any
library-specific failure in one place. Nothing here is retried internally:
waiting out a retrain interval or adding more data is up to the caller.
"""


class RegressionError(Exception):
    """Base exception for all pymlr errors."""
    pass


class NotEnoughDataError(RegressionError):
    """
    Fewer data points than a fit needs.

    Raised by ``Regression.run`` when fewer than three points have been
    trained, and by ``Regression.predict`` before the model is initialised.
    """
    pass


class TooManyVariablesError(RegressionError):
    """
    Not enough observations to support this many variables.

    Raised after feature crosses have been expanded, so registering crosses
    can push an otherwise valid model into this state.

    Attributes:
        n_observations: Number of data points in the fit
        n_variables: Post-cross variable count (intercept excluded)
    """

    def __init__(
        self,
        message: str,
        n_observations: int | None = None,
        n_variables: int | None = None,
    ):
        super().__init__(message)
        self.n_observations = n_observations
        self.n_variables = n_variables


class AlreadyRunError(RegressionError):
    """Regression has already been run for this training generation."""
    pass


class NotFittedError(RegressionError):
    """Prediction requested before any fit produced coefficients."""
    pass


class DecompositionError(RegressionError):
    """
    The QR backend failed.

    The backend's own exception is chained as ``__cause__``.

    Attributes:
        backend: Name of the backend that failed
    """

    def __init__(self, message: str, backend: str | None = None):
        super().__init__(message)
        self.backend = backend


class ValidationError(RegressionError, ValueError):
    """Input validation failed."""
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised for ragged variable tables and out-of-range column indices.
    """
    pass
