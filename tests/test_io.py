"""
Test model export and import.
"""

import json
import math
from datetime import timedelta

import pytest

from pymlr import DataPoint, InteractionCross, PowerCross, Regression
from pymlr.io import dumps, from_dict, loads, to_dict


def _fitted_fields(r):
    return {
        'coefficients': r.coefficients,
        'variance_observed': r.variance_observed,
        'variance_predicted': r.variance_predicted,
        'r2': r.r2,
        'data': r.data,
        'names': (r.observed_name, r.var_names),
        'crosses': r.crosses,
        'flags': (r.initialised, r.has_run, r.expanded),
        'times': (r.last_trained, r.min_retrain_interval),
        'formula': r.formula,
    }


def test_save_and_load(murder_model):
    murder_model.set_threshold(timedelta(seconds=1))
    murder_model.run(log_output=True)

    saved = murder_model.save()
    assert isinstance(saved, bytes)

    restored = Regression()
    restored.load(saved)
    assert _fitted_fields(restored) == _fitted_fields(murder_model)


def test_round_trip_with_crosses(square_points):
    r = Regression()
    r.set_var(0, "Input")
    r.train(*square_points)
    r.add_cross(PowerCross(0, 2))
    r.add_cross(InteractionCross(0, 1))
    r.run()

    restored = Regression.from_bytes(r.save())

    assert _fitted_fields(restored) == _fitted_fields(r)
    assert restored.predict([6]) == r.predict([6])
    # restored crosses are not re-applied to stored points
    assert restored.expanded == 5


def test_unrun_model_round_trip():
    r = Regression(backend='auto')
    r.train(DataPoint(1, [1]))

    restored = loads(dumps(r))

    assert restored.backend == 'auto'
    assert restored.data[0].predicted is None
    assert restored.last_trained is None
    assert restored.min_retrain_interval is None
    assert not restored.initialised


def test_field_names(murder_model):
    murder_model.run()
    fields = json.loads(murder_model.save())

    for key in ('names', 'data', 'coeff_map', 'r_2', 'variance_observed',
                'variance_predicted', 'initialised', 'formula', 'crosses',
                'has_run', 'last_trained', 'threshold'):
        assert key in fields
    assert set(fields['data'][0]) == {'observed', 'variables', 'predicted', 'error'}


def test_non_finite_r2_survives():
    r = Regression()
    r.train(DataPoint(5, [1]), DataPoint(5, [2]), DataPoint(5, [3]))
    with pytest.warns(RuntimeWarning):
        r.run()

    restored = loads(dumps(r))
    assert math.isnan(restored.r2) or math.isinf(restored.r2)


def test_dict_keys_become_ints():
    r = Regression()
    r.set_var(2, "c")
    restored = from_dict(to_dict(r))
    assert restored.var_names == {2: "c"}
