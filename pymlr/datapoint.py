"""
Training records and helpers for building them from tables.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from ._utils import check_table
from .exceptions import DimensionError


@dataclass
class DataPoint:
    """
    One observation: an observed value and its explanatory variables.

    ``predicted`` and ``residual`` stay ``None`` until a fit has run; the
    residual is ``predicted - observed``.
    """
    observed: float
    variables: List[float] = field(default_factory=list)
    predicted: Optional[float] = None
    residual: Optional[float] = None

    def __post_init__(self):
        self.observed = float(self.observed)
        self.variables = [float(v) for v in self.variables]

    def to_dict(self) -> dict:
        return {
            'observed': self.observed,
            'variables': list(self.variables),
            'predicted': self.predicted,
            'error': self.residual,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DataPoint':
        return cls(
            observed=data['observed'],
            variables=data.get('variables') or [],
            predicted=data.get('predicted'),
            residual=data.get('error'),
        )

    def __str__(self):
        cells = [f"{self.observed:.4f}"] + [f"{v:.2f}" for v in self.variables]
        return "|\t".join(cells)


def make_data_points(
    table: Union[pd.DataFrame, np.ndarray, list],
    obs_index: int,
) -> List[DataPoint]:
    """
    Build data points from a row-major table.

    Parameters
    ----------
    table : DataFrame, ndarray or list of rows
        Rectangular table of numbers, one row per observation
    obs_index : int
        Column holding the observed value. Negative values count from
        the end.

    Returns
    -------
    list of DataPoint
        ``observed`` is ``row[obs_index]``; ``variables`` are the other
        entries in their original order.

    Examples
    --------
    >>> points = make_data_points([[1, 2, 3], [2, 4, 6]], 0)
    >>> points[0].variables
    [2.0, 3.0]
    """
    if isinstance(table, pd.DataFrame):
        table = table.to_numpy()
    rows = check_table(table, name='table')

    n_cols = rows.shape[1]
    if not -n_cols <= obs_index < n_cols:
        raise DimensionError(
            f"obs_index {obs_index} out of range for table with {n_cols} columns"
        )
    obs_index %= n_cols

    if obs_index == 0:
        return [DataPoint(row[0], row[1:].tolist()) for row in rows]
    if obs_index == n_cols - 1:
        return [DataPoint(row[-1], row[:-1].tolist()) for row in rows]
    return _rebuild_rows(rows, obs_index)


def _rebuild_rows(rows: np.ndarray, obs_index: int) -> List[DataPoint]:
    """Observation column in the middle: copy every other cell."""
    points = []
    for row in rows:
        others = [v for i, v in enumerate(row.tolist()) if i != obs_index]
        points.append(DataPoint(row[obs_index], others))
    return points
