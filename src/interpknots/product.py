"""`ProductKnotIterator` combines the knots of several axes."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import Any

import numpy as np
import numpy.typing as npt

from .core import IteratorSize, if_instance_do
from .errors import ConfigurationError, UnsupportedOperation
from .knots import KnotIterator

__all__ = ["ProductKnotIterator", "compose"]


class ProductKnotIterator:
    """Lazy outer product of the knots of several axes.

    Produces a tuple with a knot from each axis, the first axis moving
    fastest. Each axis is restarted from its first knot whenever it runs out,
    so no axis is ever held in memory. If an axis is infinite then so is the
    product, and axes after it stay on their first knot.

    Args:
        axes: The iterators for each axis, first one moving fastest

    >>> x = KnotIterator([1, 2, 3])
    >>> y = KnotIterator([10, 20])
    >>> [tuple(int(v) for v in knot) for knot in x * y]
    [(1, 10), (2, 10), (3, 10), (1, 20), (2, 20), (3, 20)]
    """

    def __init__(self, axes: Sequence[KnotIterator]):
        if not axes:
            raise ConfigurationError("Cannot make a product of no axes")
        #: The iterators for each axis, first one moving fastest
        self.axes = list(axes)

    @property
    def ndim(self) -> int:
        """The number of axes, and so the length of each tuple produced."""
        return len(self.axes)

    @property
    def dtype(self) -> tuple[np.dtype[Any], ...]:
        """The type of each element of the tuples produced."""
        return tuple(axis.dtype for axis in self.axes)

    def iterator_size(self) -> IteratorSize:
        """Infinite if any of the axes are."""
        if all(axis.is_finite() for axis in self.axes):
            return IteratorSize.HAS_LENGTH
        return IteratorSize.IS_INFINITE

    def is_finite(self) -> bool:
        """True if iteration will stop after `len` tuples."""
        return self.iterator_size() is IteratorSize.HAS_LENGTH

    def __len__(self) -> int:
        """The number of tuples produced, only defined if finite."""
        infinite = [i for i, axis in enumerate(self.axes) if not axis.is_finite()]
        if infinite:
            raise UnsupportedOperation(
                f"Axes {infinite} produce infinitely many knots, "
                "so their product does too"
            )
        return int(np.prod([len(axis) for axis in self.axes]))

    def __bool__(self) -> bool:
        return True

    def size(self) -> tuple[int, ...]:
        """The number of knots in each axis, only defined if finite."""
        return tuple(len(axis) for axis in self.axes)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        """Yield a tuple of knots, one from each axis."""
        iterators = [iter(axis) for axis in self.axes]
        # Every axis has at least one knot
        current = [next(it) for it in iterators]
        while True:
            yield tuple(current)
            # Advance like an odometer, rolling faster axes back to the start
            for i, axis in enumerate(self.axes):
                try:
                    current[i] = next(iterators[i])
                    break
                except StopIteration:
                    iterators[i] = iter(axis)
                    current[i] = next(iterators[i])
            else:
                # Every axis rolled over, so we're back at the start
                return

    def take(self, num: int, start: int = 0) -> npt.NDArray[Any]:
        """Return num tuples from index start as a (num, ndim) array.

        Finite products return fewer rows if they would run past the end.

        >>> x = KnotIterator([1.0, 2.0, 3.0])
        >>> y = KnotIterator([0.0, 1.0])
        >>> (x * y).take(2, start=2)
        array([[3., 0.],
               [1., 1.]])
        """
        end = start + num
        if self.is_finite():
            end = min(end, len(self))
        indices = np.arange(start, max(start, end))
        # Example numbers below from a 3x2x2 XxYxZ product
        # Number of times each knot will repeat: X:1, Y:3, Z:6
        # X:012012012012
        # Y:000111000111
        # Z:000000111111
        repeats: int | None = 1
        columns = []
        for axis in self.axes:
            if repeats is None:
                # Behind an infinite axis, never moves
                axis_indices = np.zeros_like(indices)
            elif axis.is_finite():
                axis_indices = (indices // repeats) % len(axis)
                repeats *= len(axis)
            else:
                axis_indices = indices // repeats
                repeats = None
            columns.append(axis.extract(axis_indices))
        return np.stack(columns, axis=-1)

    def __mul__(self, other: Any) -> Any:
        return if_instance_do(
            other,
            (KnotIterator, ProductKnotIterator),
            lambda o: ProductKnotIterator(
                self.axes + (o.axes if isinstance(o, ProductKnotIterator) else [o])
            ),
        )

    def __repr__(self) -> str:
        return f"ProductKnotIterator({self.axes!r})"


def compose(axes: Sequence[KnotIterator]) -> KnotIterator | ProductKnotIterator:
    """Return the iterator itself for a single axis, or a product of several.

    A single axis therefore produces bare knots rather than 1-tuples.
    """
    if len(axes) == 1:
        return axes[0]
    return ProductKnotIterator(axes)
