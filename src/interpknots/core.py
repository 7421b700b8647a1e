"""Core helpers like `periodic_wrap`, `reflect_wrap` and the tagged union."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, Literal, TypeVar, overload

import numpy as np
import numpy.typing as npt
from pydantic import ConfigDict, Field, GetCoreSchemaHandler
from pydantic_core import CoreSchema
from pydantic_core.core_schema import tagged_union_schema

from .errors import ConfigurationError

__all__ = [
    "IndexArray",
    "IteratorSize",
    "StrictConfig",
    "discriminated_union_of_subclasses",
    "if_instance_do",
    "periodic_wrap",
    "reflect_wrap",
]

#: Used to ensure pydantic dataclasses error if given extra arguments
StrictConfig: ConfigDict = {"extra": "forbid", "arbitrary_types_allowed": True}

C = TypeVar("C")

#: Array of integer step or knot indices
IndexArray = npt.NDArray[np.signedinteger[Any]]


class IteratorSize(str, Enum):
    """Whether iterating will produce a finite or an infinite sequence."""

    HAS_LENGTH = "HAS_LENGTH"
    IS_INFINITE = "IS_INFINITE"


def discriminated_union_of_subclasses(
    super_cls: type[C],
    discriminator: str = "type",
) -> type[C]:
    """Add all subclasses of super_cls to a discriminated union.

    For all subclasses of super_cls, add a discriminator field to identify
    the type. Raw JSON should look like {<discriminator>: <type name>, params for
    <type name>...}.

    Subclasses that extend this class must be Pydantic dataclasses. Unlike a
    plain ``Union`` the set of members grows as subclasses are declared, so a
    field annotated with super_cls accepts any of them.

    Example::

        @discriminated_union_of_subclasses
        class Shape:
            pass


        @dataclass
        class Square(Shape):
            side: float


        assert TypeAdapter(Shape).validate_python(
            {"type": "Square", "side": 2}
        ) == Square(2)

    Args:
        super_cls: The superclass of the union, Shape in the above example
        discriminator: The discriminator that will be inserted into the
            serialized documents for type determination. Defaults to "type".

    Returns:
        Type: decorated superclass with handling for subclasses to be added
            to its discriminated union for deserialization

    """
    subclasses: list[type[C]] = []

    def add_subclass_to_union(subclass: type[C]):
        # Add a discriminator field to a subclass so it can
        # be identified when deserializing
        subclass.__annotations__ = {
            **subclass.__annotations__,
            discriminator: Literal[subclass.__name__],  # type: ignore
        }
        setattr(subclass, discriminator, Field(subclass.__name__, repr=False))  # type: ignore
        subclasses.append(subclass)

    def get_schema_of_union(
        cls: type[C], actual_type: type, handler: GetCoreSchemaHandler
    ) -> CoreSchema:
        if cls is not super_cls:
            return handler(cls)
        return tagged_union_schema(
            {sub.__name__: handler(sub) for sub in subclasses},
            discriminator=discriminator,
            ref=super_cls.__name__,
        )

    super_cls.__init_subclass__ = classmethod(add_subclass_to_union)  # type: ignore
    super_cls.__get_pydantic_core_schema__ = classmethod(get_schema_of_union)  # type: ignore
    return super_cls


def _check_range(lo: int, hi: int) -> int:
    if hi <= lo:
        raise ConfigurationError(f"Cannot wrap onto [{lo}, {hi}], need lo < hi")
    return hi - lo


@overload
def periodic_wrap(i: int, lo: int, hi: int) -> int: ...
@overload
def periodic_wrap(i: IndexArray, lo: int, hi: int) -> IndexArray: ...
def periodic_wrap(i: int | IndexArray, lo: int, hi: int) -> int | IndexArray:
    """Map step index i onto [lo, hi] repeating with period hi - lo.

    Works for any integer, including negative ones, and elementwise on
    integer arrays. As the period is hi - lo, hi itself is never produced
    and lo stands in for it.

    >>> [periodic_wrap(i, 1, 4) for i in range(-1, 8)]
    [2, 3, 1, 2, 3, 1, 2, 3, 1]
    >>> periodic_wrap(np.arange(5), 0, 2)
    array([0, 1, 0, 1, 0])
    """
    period = _check_range(lo, hi)
    # Python and numpy % both floor, so negative i wrap the right way
    return lo + (i - lo) % period


@overload
def reflect_wrap(i: int, lo: int, hi: int) -> int: ...
@overload
def reflect_wrap(i: IndexArray, lo: int, hi: int) -> IndexArray: ...
def reflect_wrap(i: int | IndexArray, lo: int, hi: int) -> int | IndexArray:
    """Fold step index i onto [lo, hi] as a triangle wave of period 2(hi - lo).

    Indices run lo to hi then back down to lo, like a snaked axis:

    >>> [reflect_wrap(i, 1, 4) for i in range(1, 11)]
    [1, 2, 3, 4, 3, 2, 1, 2, 3, 4]
    >>> reflect_wrap(np.array([-2, -1, 0, 1]), 0, 2)
    array([2, 1, 0, 1])
    """
    width = _check_range(lo, hi)
    # E.g for lo = 1, hi = 4
    # i:        1234567890
    # folded:   0123450123
    # reflect:  1234321234
    folded = (i - lo) % (2 * width)
    if isinstance(folded, np.ndarray):
        return lo + np.where(folded <= width, folded, 2 * width - folded)
    return lo + (folded if folded <= width else 2 * width - folded)


def if_instance_do(x: Any, cls: type | tuple[type, ...], func: Callable[[Any], C]) -> C:
    """If x is of type cls then return func(x), otherwise return NotImplemented.

    Used as a helper when implementing operator overloading.
    """
    if isinstance(x, cls):
        return func(x)
    else:
        return NotImplemented
