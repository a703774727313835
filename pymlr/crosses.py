"""
Feature crosses.

A feature cross derives new variables from an existing variable vector,
for example a power of one input or the product of two inputs. Derived
values are appended after the original variables when a model is fit, and
again to every vector passed to ``Regression.predict``.

New kinds are added by subclassing ``FeatureCross`` and decorating the
class with ``register_cross``; the fitting engine only ever calls
``calculate`` and ``extend_names``.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from typing import Dict, List, Sequence


_CROSS_KINDS: Dict[str, type] = {}


def register_cross(cls):
    """Class decorator making a cross kind available to ``from_dict``."""
    _CROSS_KINDS[cls.kind] = cls
    return cls


def _display_name(names: Dict[int, str], index: int) -> str:
    name = names.get(index, "")
    return name if name else f"X{index}"


class FeatureCross(ABC):
    """Abstract base class for all feature crosses."""

    kind: str = ""

    @abstractmethod
    def calculate(self, variables: Sequence[float]) -> List[float]:
        """
        Compute the derived values for one variable vector.

        Must be pure: the input is never modified and only indices that
        exist in ``variables`` at call time are read.
        """
        pass

    @abstractmethod
    def extend_names(self, names: Dict[int, str], next_index: int) -> int:
        """
        Name the derived variables.

        Writes display names into ``names`` starting at ``next_index`` and
        returns how many slots were used. Indices below ``next_index`` are
        left alone.
        """
        pass

    def to_dict(self) -> dict:
        """Tagged mapping used by model export."""
        return {'kind': self.kind, **asdict(self)}

    @staticmethod
    def from_dict(data: dict) -> 'FeatureCross':
        """Rebuild a cross from ``to_dict`` output."""
        params = dict(data)
        kind = params.pop('kind', None)
        try:
            cls = _CROSS_KINDS[kind]
        except KeyError:
            raise ValueError(
                f"Unknown feature cross kind: {kind!r}\n"
                f"Registered kinds: {sorted(_CROSS_KINDS)}"
            ) from None
        return cls(**params)


@register_cross
@dataclass(frozen=True)
class PowerCross(FeatureCross):
    """
    Raise variable ``index`` to an integer ``power``.

    >>> PowerCross(0, 2).calculate([6.0])
    [36.0]
    """
    index: int
    power: int

    kind = 'power'

    def calculate(self, variables: Sequence[float]) -> List[float]:
        return [float(variables[self.index]) ** self.power]

    def extend_names(self, names: Dict[int, str], next_index: int) -> int:
        names[next_index] = f"({_display_name(names, self.index)})^{self.power}"
        return 1


@register_cross
@dataclass(frozen=True)
class InteractionCross(FeatureCross):
    """Product of variables ``left`` and ``right``."""
    left: int
    right: int

    kind = 'interaction'

    def calculate(self, variables: Sequence[float]) -> List[float]:
        return [float(variables[self.left]) * float(variables[self.right])]

    def extend_names(self, names: Dict[int, str], next_index: int) -> int:
        left = _display_name(names, self.left)
        right = _display_name(names, self.right)
        names[next_index] = f"({left})*({right})"
        return 1


# Convenience constructors
def pow_cross(index: int, power: int) -> PowerCross:
    """Shorthand for ``PowerCross(index, power)``."""
    return PowerCross(index, power)


def multiply_cross(left: int, right: int) -> InteractionCross:
    """Shorthand for ``InteractionCross(left, right)``."""
    return InteractionCross(left, right)
