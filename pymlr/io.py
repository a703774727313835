"""
Model export and import.

A model is exported as a tagged mapping of field name to value and
encoded as JSON bytes. NaN and Infinity are written as the JSON
extensions ``NaN``/``Infinity`` so degenerate fits round-trip.
"""

import json
from datetime import datetime, timedelta

from .crosses import FeatureCross
from .datapoint import DataPoint
from .regression import Regression


def to_dict(model: Regression) -> dict:
    """Export every field of a model to plain Python types."""
    threshold = model.min_retrain_interval
    return {
        'names': {
            'obs': model.observed_name,
            'vars': {str(i): name for i, name in model.var_names.items()},
        },
        'data': [point.to_dict() for point in model.data],
        'coeff_map': {str(i): c for i, c in model.coefficients.items()},
        'r_2': model.r2,
        'variance_observed': model.variance_observed,
        'variance_predicted': model.variance_predicted,
        'initialised': model.initialised,
        'formula': model.formula,
        'crosses': [cross.to_dict() for cross in model.crosses],
        'has_run': model.has_run,
        'last_trained': model.last_trained.isoformat() if model.last_trained else None,
        'threshold': threshold.total_seconds() if threshold is not None else None,
        'expanded': model.expanded,
        'backend': model.backend,
    }


def from_dict(data: dict) -> Regression:
    """Rebuild a model from ``to_dict`` output."""
    model = Regression(backend=data.get('backend', 'cpu'))

    names = data.get('names') or {}
    model.observed_name = names.get('obs', "")
    model.var_names = {int(i): name for i, name in (names.get('vars') or {}).items()}

    model.data = [DataPoint.from_dict(d) for d in data.get('data') or []]
    model.crosses = [FeatureCross.from_dict(c) for c in data.get('crosses') or []]
    model.coefficients = {
        int(i): float(c) for i, c in (data.get('coeff_map') or {}).items()
    }

    model.r2 = float(data.get('r_2', 0.0))
    model.variance_observed = float(data.get('variance_observed', 0.0))
    model.variance_predicted = float(data.get('variance_predicted', 0.0))
    model.initialised = bool(data.get('initialised', False))
    model.formula = data.get('formula', "")
    model.has_run = bool(data.get('has_run', False))
    model.expanded = int(data.get('expanded', 0))

    last_trained = data.get('last_trained')
    model.last_trained = datetime.fromisoformat(last_trained) if last_trained else None

    threshold = data.get('threshold')
    model.min_retrain_interval = timedelta(seconds=threshold) if threshold is not None else None
    return model


def dumps(model: Regression) -> bytes:
    """Serialize a model to JSON bytes."""
    return json.dumps(to_dict(model)).encode('utf-8')


def loads(data) -> Regression:
    """Deserialize a model from JSON bytes or text."""
    if isinstance(data, (bytes, bytearray)):
        data = data.decode('utf-8')
    return from_dict(json.loads(data))
