"""`KnotIterator` produces the knots of a single axis under a `BoundaryPolicy`.

The state of a traversal is held outside the iterator, so any number of
traversals can share one `KnotIterator` and the knot array it references:

- `NoRepeat`: the state is a cursor, the 1-based index of the next knot
- `Periodic` and `Reflect`: the state is ``(step, offset)`` where step is the
  1-based number of the next knot produced and offset is the distance the
  knots have been shifted by the cycles completed so far

Iterating with ``iter()`` or a for loop starts from `KnotIterator.initial_state`
each time, so the same knots are produced however often it is done.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator, Sequence
from typing import Any, SupportsFloat

import numpy as np
import numpy.typing as npt

from .boundary import BoundaryPolicy, NoRepeat, Periodic, Reflect
from .core import IndexArray, IteratorSize, if_instance_do, periodic_wrap, reflect_wrap
from .errors import ConfigurationError, UnsupportedOperation

__all__ = ["KnotSequence", "KnotState", "KnotIterator", "build_axis_iterators"]

LOGGER = logging.getLogger(__name__)

#: Strictly increasing knot positions along an axis
KnotSequence = npt.NDArray[Any] | Sequence[SupportsFloat]

#: Cursor for NoRepeat, (step, offset) for repeating policies
KnotState = int | tuple[int, Any]

#: Make the next knot and state from the current state, None when finished
Stepper = Callable[["KnotIterator", Any], tuple[Any, Any] | None]

#: Make the knots at an array of 1-based steps in one go
Taker = Callable[["KnotIterator", IndexArray], npt.NDArray[Any]]


def _step_once(it: KnotIterator, cursor: int) -> tuple[Any, int] | None:
    if cursor > it.nknots:
        return None
    return it.knots[cursor - 1], cursor + 1


def _step_periodic(
    it: KnotIterator, state: tuple[int, Any]
) -> tuple[Any, tuple[int, Any]]:
    step, offset = state
    knot = it.knots[periodic_wrap(step, 1, it.nknots) - 1] + offset
    # Having produced nknots-1 sub-intervals the next knot starts a new cycle,
    # where the first knot stands in for the last one we just passed
    if step % (it.nknots - 1) == 0:
        offset = offset + it.span
    return knot, (step + 1, offset)


def _step_reflect(
    it: KnotIterator, state: tuple[int, Any]
) -> tuple[Any, tuple[int, Any]]:
    step, offset = state
    cycle_pos = step % it.cycle_length
    knot = it.knots[reflect_wrap(step, 1, it.nknots) - 1]
    if 0 < cycle_pos <= it.nknots:
        # Forward pass, shifted by the whole cycles completed
        knot = knot + offset
    else:
        # Backward pass, mirrored about the last knot
        knot = offset + 2 * it.knots[-1] - knot
    # A forward and a backward pass cover twice the span
    if cycle_pos == 0:
        offset = offset + 2 * it.span
    return knot, (step + 1, offset)


def _take_once(it: KnotIterator, steps: IndexArray) -> npt.NDArray[Any]:
    return it.knots[steps[(steps >= 1) & (steps <= it.nknots)] - 1]


def _take_periodic(it: KnotIterator, steps: IndexArray) -> npt.NDArray[Any]:
    cycles = (steps - 1) // (it.nknots - 1)
    return it.knots[periodic_wrap(steps, 1, it.nknots) - 1] + cycles * it.span


def _take_reflect(it: KnotIterator, steps: IndexArray) -> npt.NDArray[Any]:
    # E.g. for nknots = 4, cycle_length = 6
    # steps:     123456789012
    # cycle_pos: 123450123450
    # forwards:  111100111100
    # cycles:    000000111111
    cycle_pos = steps % it.cycle_length
    forwards = (0 < cycle_pos) & (cycle_pos <= it.nknots)
    offset = ((steps - 1) // it.cycle_length) * (2 * it.span)
    knots = it.knots[reflect_wrap(steps, 1, it.nknots) - 1]
    return np.where(forwards, knots + offset, offset + 2 * it.knots[-1] - knots)


_ALGORITHMS: dict[type[BoundaryPolicy], tuple[Stepper, Taker]] = {
    NoRepeat: (_step_once, _take_once),
    Periodic: (_step_periodic, _take_periodic),
    Reflect: (_step_reflect, _take_reflect),
}


class KnotIterator:
    """Iterate over the knots of an axis, extended according to a policy.

    Args:
        knots: Strictly increasing positions of the knots along the axis.
            A numpy array is referenced rather than copied
        policy: How to continue the axis past its last knot

    Finite for `NoRepeat`, infinite for `Periodic` and `Reflect`, and a
    `Directional` policy behaves like its forward member.

    >>> it = KnotIterator([1.0, 1.2, 2.3, 3.0], Periodic())
    >>> it.take(6)
    array([1. , 1.2, 2.3, 3. , 3.2, 4.3])
    >>> it.is_finite()
    False

    Combine the iterators for several axes with ``*`` to get a
    `ProductKnotIterator`.
    """

    def __init__(self, knots: KnotSequence, policy: BoundaryPolicy | None = None):
        if policy is None:
            policy = NoRepeat()
        array = np.asarray(knots)
        if array.ndim != 1 or len(array) == 0:
            raise ConfigurationError(
                f"Expected a non-empty 1D sequence of knots, got shape {array.shape}"
            )
        # A read-only view so the caller's array is shared but not frozen
        array = array.view()
        array.flags.writeable = False
        #: The knots of the axis to iterate over
        self.knots = array
        #: How the axis is continued past its last knot
        self.policy = policy
        #: The number of knots, len(knots)
        self.nknots = len(array)
        forward = policy.forward_policy()
        if forward.repeats() and self.nknots < 2:
            raise ConfigurationError(
                f"{policy} needs at least 2 knots to make a cycle, got {self.nknots}"
            )
        self._size = forward.iterator_size()
        self._step, self._take = _ALGORITHMS[type(forward)]
        LOGGER.debug("Iterating %d knots with %s", self.nknots, policy)

    @property
    def span(self) -> Any:
        """The distance from the first to the last knot."""
        return self.knots[-1] - self.knots[0]

    @property
    def cycle_length(self) -> int:
        """Number of steps in a forward then backward pass, for Reflect."""
        return 2 * (self.nknots - 1)

    @property
    def dtype(self) -> np.dtype[Any]:
        """The type of every knot produced, whether finite or not."""
        return self.knots.dtype

    def iterator_size(self) -> IteratorSize:
        """Whether the knots will run out."""
        return self._size

    def is_finite(self) -> bool:
        """True if iteration will stop after `len` knots."""
        return self._size is IteratorSize.HAS_LENGTH

    def initial_state(self) -> KnotState:
        """The state before the first knot has been produced."""
        if self.is_finite():
            return 1
        return (1, self.dtype.type(0))

    def step(self, state: Any) -> tuple[Any, KnotState] | None:
        """Return the knot at state and the state after it, or None at the end.

        >>> it = KnotIterator([0, 2, 3], Reflect())
        >>> it.step(it.initial_state())
        (np.int64(0), (2, np.int64(0)))
        """
        return self._step(self, state)

    def extract(self, indices: IndexArray) -> npt.NDArray[Any]:
        """Return the knots at 0-based positions in the sequence, without iterating.

        Indices outside a finite iterator are dropped.

        >>> KnotIterator([1, 3, 4], Reflect()).extract(np.array([0, 3, 5]))
        array([1, 5, 9])
        """
        return self._take(self, np.asarray(indices) + 1)

    def take(self, num: int, start: int = 0) -> npt.NDArray[Any]:
        """Return num knots from index start as an array, without iterating.

        Finite iterators return fewer knots if they would run past the end.

        >>> KnotIterator([1, 3, 4], Reflect()).take(4, start=2)
        array([4, 5, 7, 9])
        """
        return self.extract(np.arange(start, start + num))

    def __iter__(self) -> Iterator[Any]:
        """Yield the knots from the first onwards."""
        state = self.initial_state()
        while True:
            result = self.step(state)
            if result is None:
                return
            knot, state = result
            yield knot

    def __len__(self) -> int:
        """The number of knots produced, only defined if finite."""
        if not self.is_finite():
            raise UnsupportedOperation(
                f"Iterating with {self.policy} produces infinitely many knots"
            )
        return self.nknots

    def __bool__(self) -> bool:
        # Always at least one knot, and don't fall back to len() which may raise
        return True

    def size(self) -> tuple[int]:
        """The shape of the knots produced, only defined if finite."""
        return (len(self),)

    def __mul__(self, other: Any) -> Any:
        from .product import ProductKnotIterator

        return if_instance_do(
            other,
            (KnotIterator, ProductKnotIterator),
            lambda o: ProductKnotIterator([self]) * o,
        )

    def __repr__(self) -> str:
        return f"KnotIterator({self.knots!r}, {self.policy!r})"


def build_axis_iterators(
    knot_sequences: Sequence[KnotSequence],
    policy: BoundaryPolicy | Sequence[BoundaryPolicy] | None = None,
) -> list[KnotIterator]:
    """Make a `KnotIterator` for each axis.

    Args:
        knot_sequences: The knots of each axis
        policy: A single policy to use on every axis, or one per axis.
            Defaults to `NoRepeat`

    Raises:
        ConfigurationError: If the number of policies does not match the
            number of axes, or any axis cannot be iterated with its policy
    """
    if policy is None or isinstance(policy, BoundaryPolicy):
        policies = [policy or NoRepeat()] * len(knot_sequences)
    else:
        policies = list(policy)
        if len(policies) != len(knot_sequences):
            raise ConfigurationError(
                f"Got {len(policies)} boundary policies for "
                f"{len(knot_sequences)} axes"
            )
    iterators = []
    for axis, (knots, axis_policy) in enumerate(
        zip(knot_sequences, policies, strict=True)
    ):
        try:
            iterators.append(KnotIterator(knots, axis_policy))
        except ConfigurationError as e:
            raise ConfigurationError(f"Axis {axis}: {e}") from e
    return iterators
