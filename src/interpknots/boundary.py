"""`BoundaryPolicy` and its subclasses.

A policy says how an axis is continued past its last knot when iterating
over knots. Only the shape of the repetition matters here, so the many
extrapolation boundary conditions of an interpolation package collapse to:

- `NoRepeat`: iterate over the knots once
- `Periodic`: repeat the knots, shifted by the axis span each cycle
- `Reflect`: mirror the knots about the last one, then repeat
- `Directional`: different policies backwards and forwards along the axis
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import Field, TypeAdapter
from pydantic.dataclasses import dataclass

from .core import IteratorSize, StrictConfig, discriminated_union_of_subclasses
from .errors import ConfigurationError

__all__ = [
    "BoundaryPolicy",
    "NoRepeat",
    "Periodic",
    "Reflect",
    "Directional",
    "parse_policy",
]


@discriminated_union_of_subclasses
class BoundaryPolicy:
    """A serializable description of how an axis repeats past its knots.

    Abstract baseclass, only the subclasses in this module are valid.
    """

    def forward_policy(self) -> BoundaryPolicy:
        """The policy used when iterating forwards along the axis."""
        return self

    def iterator_size(self) -> IteratorSize:
        """Whether iterating the knots under this policy ever stops."""
        raise NotImplementedError(self)

    def repeats(self) -> bool:
        """True if the knots are repeated forever."""
        return self.iterator_size() is IteratorSize.IS_INFINITE

    def serialize(self) -> Mapping[str, Any]:
        """Serialize the BoundaryPolicy to a dictionary."""
        return TypeAdapter(BoundaryPolicy).dump_python(self)

    @staticmethod
    def deserialize(obj: Any) -> BoundaryPolicy:
        """Deserialize a BoundaryPolicy from a dictionary."""
        return TypeAdapter(BoundaryPolicy).validate_python(obj)


@dataclass(config=StrictConfig, frozen=True)
class NoRepeat(BoundaryPolicy):
    """Produce each knot exactly once.

    >>> NoRepeat().iterator_size()
    <IteratorSize.HAS_LENGTH: 'HAS_LENGTH'>
    """

    def iterator_size(self) -> IteratorSize:  # noqa: D102
        return IteratorSize.HAS_LENGTH


@dataclass(config=StrictConfig, frozen=True)
class Periodic(BoundaryPolicy):
    """Repeat the knots forever, shifting by the span of the axis each time.

    The last knot of one cycle and the first knot of the next coincide, so
    it is only produced once.
    """

    def iterator_size(self) -> IteratorSize:  # noqa: D102
        return IteratorSize.IS_INFINITE


@dataclass(config=StrictConfig, frozen=True)
class Reflect(BoundaryPolicy):
    """Mirror the knots about the last knot, then repeat that pair forever."""

    def iterator_size(self) -> IteratorSize:  # noqa: D102
        return IteratorSize.IS_INFINITE


#: The policies that can be members of a `Directional`
SimplePolicy = NoRepeat | Periodic | Reflect


@dataclass(config=StrictConfig, frozen=True)
class Directional(BoundaryPolicy):
    """A pair of policies, one for each direction along the axis.

    Iteration only ever moves forwards, so the backward policy is carried
    for the benefit of other consumers and has no effect on the knots.

    >>> Directional(NoRepeat(), Periodic()).repeats()
    True
    """

    backward: SimplePolicy = Field(
        description="Applies before the first knot of the axis"
    )
    forward: SimplePolicy = Field(
        description="Applies after the last knot of the axis"
    )

    def forward_policy(self) -> BoundaryPolicy:  # noqa: D102
        return self.forward

    def iterator_size(self) -> IteratorSize:  # noqa: D102
        return self.forward.iterator_size()


_POLICY_NAMES: dict[str, type[NoRepeat | Periodic | Reflect]] = {
    "norepeat": NoRepeat,
    # Boundary conditions that never repeat the knots
    "throw": NoRepeat,
    "flat": NoRepeat,
    "line": NoRepeat,
    "periodic": Periodic,
    "reflect": Reflect,
}


def parse_policy(name: str) -> BoundaryPolicy:
    """Make a BoundaryPolicy from a name like ``periodic`` or ``flat:reflect``.

    A single name applies in both directions, ``backward:forward`` makes a
    `Directional` policy.

    >>> parse_policy("Reflect")
    Reflect()
    >>> parse_policy("throw:periodic")
    Directional(backward=NoRepeat(), forward=Periodic())
    """

    def simple(part: str) -> NoRepeat | Periodic | Reflect:
        try:
            return _POLICY_NAMES[part.strip().lower()]()
        except KeyError:
            raise ConfigurationError(
                f"Unknown boundary policy {part!r}, "
                f"expected one of {sorted(_POLICY_NAMES)}"
            ) from None

    parts = name.split(":")
    if len(parts) == 1:
        return simple(parts[0])
    elif len(parts) == 2:
        return Directional(simple(parts[0]), simple(parts[1]))
    else:
        raise ConfigurationError(
            f"Expected 'policy' or 'backward:forward', got {name!r}"
        )
