"""
Shared test data.
"""

import json
from pathlib import Path

import pytest

from pymlr import DataPoint, Regression

FIXTURES_DIR = Path(__file__).parent / "fixtures"


def load_fixture(name):
    """Load a test fixture from JSON."""
    with open(FIXTURES_DIR / f"{name}.json", 'r') as f:
        return json.load(f)


@pytest.fixture
def murder_rates():
    return load_fixture("murder_rates")


@pytest.fixture
def murder_model(murder_rates):
    """Trained, not yet run, model over the murder-rate dataset."""
    r = Regression()
    r.set_observed(murder_rates["observed_name"])
    for i, name in enumerate(murder_rates["variable_names"]):
        r.set_var(i, name)
    r.train(*(
        DataPoint(obs, row)
        for obs, row in zip(murder_rates["observed"], murder_rates["variables"])
    ))
    return r


@pytest.fixture
def square_points():
    """Samples of y = x^2 + x."""
    return [
        DataPoint(6, [2]),
        DataPoint(20, [4]),
        DataPoint(30, [5]),
        DataPoint(72, [8]),
        DataPoint(156, [12]),
    ]
