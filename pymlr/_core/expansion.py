"""
Feature cross expansion.

Applies registered crosses to variable vectors and extends the variable
name table to match.
"""

from typing import Dict, List, Sequence


def apply_crosses(variables: Sequence[float], crosses) -> List[float]:
    """
    Append the output of every cross to a copy of ``variables``.

    Crosses run in registration order and each sees the vector as
    extended by the crosses before it.
    """
    expanded = [float(v) for v in variables]
    for cross in crosses:
        expanded.extend(cross.calculate(expanded))
    return expanded


def extend_names(names: Dict[int, str], crosses, start: int) -> Dict[int, str]:
    """
    Return a copy of ``names`` with the cross-introduced variables named.

    Parameters
    ----------
    names : dict
        Variable index to display name
    crosses : sequence of FeatureCross
        Registered crosses, in order
    start : int
        First free index, i.e. the pre-cross variable count
    """
    extended = dict(names)
    cursor = start
    for cross in crosses:
        cursor += cross.extend_names(extended, cursor)
    return extended
