"""Get the knots of an interpolation or extrapolation with `knots`.

Anything with a ``get_knots()`` method returning the knots of each axis is an
`Interpolation`. If it also has a ``boundary_policy()`` method it is an
`Extrapolation`, and its knots continue past the grid according to that
policy. `KnotGrid` is a serializable implementation of both.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

import numpy as np
from pydantic import Field, TypeAdapter
from pydantic.dataclasses import dataclass

from .boundary import BoundaryPolicy, NoRepeat
from .core import StrictConfig
from .errors import ConfigurationError
from .knots import KnotIterator, KnotSequence, build_axis_iterators
from .product import ProductKnotIterator, compose

__all__ = ["Interpolation", "Extrapolation", "KnotGrid", "knots"]


@runtime_checkable
class Interpolation(Protocol):
    """An interpolant defined on a grid of knots."""

    def get_knots(self) -> Sequence[KnotSequence]:
        """The knots of each axis, in order."""
        ...


@runtime_checkable
class Extrapolation(Interpolation, Protocol):
    """An interpolant that also knows how to continue past its grid."""

    def boundary_policy(self) -> BoundaryPolicy | Sequence[BoundaryPolicy]:
        """A policy for every axis, or one for each axis."""
        ...


def knots(
    interpolant: Interpolation, interpolation_only: bool = False
) -> KnotIterator | ProductKnotIterator:
    """Return an iterator over the knot positions of an interpolant.

    Produces scalar knots for a single axis, and tuples with a knot from each
    axis (the first moving fastest) for more. An `Extrapolation` with a
    `Periodic` or `Reflect` policy produces an infinite sequence of knots.

    Args:
        interpolant: Something with knots, and maybe a boundary policy
        interpolation_only: If True then ignore any boundary policy, and only
            produce the knots of the grid itself

    >>> from itertools import islice
    >>> from interpknots.boundary import Periodic
    >>> grid = KnotGrid([[1.0, 1.2, 2.3, 3.0]], Periodic())
    >>> [round(float(k), 6) for k in islice(knots(grid), 5)]
    [1.0, 1.2, 2.3, 3.0, 3.2]
    >>> len(knots(grid, interpolation_only=True))
    4
    """
    policy: BoundaryPolicy | Sequence[BoundaryPolicy] = NoRepeat()
    if not interpolation_only and isinstance(interpolant, Extrapolation):
        policy = interpolant.boundary_policy()
    return compose(build_axis_iterators(interpolant.get_knots(), policy))


@dataclass(config=StrictConfig)
class KnotGrid:
    """A grid of knots with a boundary policy, standing in for an interpolant.

    >>> grid = KnotGrid([[0, 1], [0, 2, 4]])
    >>> grid.shape()
    (2, 3)
    """

    axes: list[list[float]] = Field(
        min_length=1, description="Strictly increasing knots for each axis"
    )
    boundary: BoundaryPolicy | list[BoundaryPolicy] = Field(
        default_factory=NoRepeat,
        description="Policy for every axis, or a list with one for each axis",
    )

    def __post_init__(self):
        for i, axis in enumerate(self.axes):
            if not axis:
                raise ConfigurationError(f"Axis {i} has no knots")
            if np.any(np.diff(axis) <= 0):
                raise ConfigurationError(
                    f"Axis {i} knots {axis} are not strictly increasing"
                )
        if isinstance(self.boundary, list) and len(self.boundary) != len(self.axes):
            raise ConfigurationError(
                f"Got {len(self.boundary)} boundary policies for "
                f"{len(self.axes)} axes"
            )

    def get_knots(self) -> list[np.ndarray[Any, np.dtype[np.float64]]]:
        """The knots of each axis as float arrays."""
        return [np.asarray(axis, dtype=np.float64) for axis in self.axes]

    def boundary_policy(self) -> BoundaryPolicy | list[BoundaryPolicy]:
        """The boundary policy of each axis."""
        return self.boundary

    def shape(self) -> tuple[int, ...]:
        """The number of knots in each axis of the grid."""
        return tuple(len(axis) for axis in self.axes)

    def serialize(self) -> Mapping[str, Any]:
        """Serialize the KnotGrid to a dictionary."""
        return TypeAdapter(KnotGrid).dump_python(self)

    @staticmethod
    def deserialize(obj: Any) -> KnotGrid:
        """Deserialize a KnotGrid from a dictionary."""
        return TypeAdapter(KnotGrid).validate_python(obj)
