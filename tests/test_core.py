import numpy as np
import pytest
from pydantic import TypeAdapter
from pydantic.dataclasses import dataclass

from interpknots.core import (
    discriminated_union_of_subclasses,
    periodic_wrap,
    reflect_wrap,
)
from interpknots.errors import ConfigurationError


@discriminated_union_of_subclasses
class Shape:
    pass


@dataclass
class Square(Shape):
    side: float


@dataclass
class Circle(Shape):
    radius: float


def test_periodic_wrap_values() -> None:
    assert [periodic_wrap(i, 1, 4) for i in range(1, 9)] == [1, 2, 3, 1, 2, 3, 1, 2]


def test_reflect_wrap_values() -> None:
    expected = [1, 2, 3, 4, 3, 2, 1, 2, 3, 4, 3]
    assert [reflect_wrap(i, 1, 4) for i in range(1, 12)] == expected


@pytest.mark.parametrize("lo,hi", [(1, 2), (1, 4), (0, 5), (-3, 2)])
@pytest.mark.parametrize("i", range(-12, 13))
def test_wraps_stay_in_range(i: int, lo: int, hi: int) -> None:
    assert lo <= periodic_wrap(i, lo, hi) < hi
    assert lo <= reflect_wrap(i, lo, hi) <= hi


@pytest.mark.parametrize("lo,hi", [(1, 2), (1, 4), (0, 5), (-3, 2)])
@pytest.mark.parametrize("k", [-3, -1, 1, 2, 7])
def test_wraps_are_periodic(k: int, lo: int, hi: int) -> None:
    for i in range(-10, 11):
        assert periodic_wrap(i + k * (hi - lo), lo, hi) == periodic_wrap(i, lo, hi)
        assert reflect_wrap(i + 2 * k * (hi - lo), lo, hi) == reflect_wrap(i, lo, hi)


def test_reflect_wrap_is_symmetric_about_hi() -> None:
    for d in range(6):
        assert reflect_wrap(4 + d, 1, 4) == reflect_wrap(4 - d, 1, 4)


def test_wraps_identity_inside_range() -> None:
    for i in range(1, 4):
        assert periodic_wrap(i, 1, 4) == i
    for i in range(1, 5):
        assert reflect_wrap(i, 1, 4) == i


def test_wraps_on_arrays_match_scalars() -> None:
    indices = np.arange(-7, 15)
    assert periodic_wrap(indices, 1, 5).tolist() == [
        periodic_wrap(int(i), 1, 5) for i in indices
    ]
    assert reflect_wrap(indices, 1, 5).tolist() == [
        reflect_wrap(int(i), 1, 5) for i in indices
    ]


@pytest.mark.parametrize("lo,hi", [(1, 1), (3, 2)])
def test_wraps_need_a_range(lo: int, hi: int) -> None:
    with pytest.raises(ConfigurationError, match="need lo < hi"):
        periodic_wrap(0, lo, hi)
    with pytest.raises(ConfigurationError, match="need lo < hi"):
        reflect_wrap(0, lo, hi)


def test_tagged_union_deserializes_subclasses() -> None:
    shape = TypeAdapter(Shape).validate_python({"type": "Circle", "radius": "2.5"})
    assert shape == Circle(2.5)
    assert TypeAdapter(Shape).dump_python(Square(3)) == {"type": "Square", "side": 3}


def test_tagged_union_rejects_unknown_type() -> None:
    with pytest.raises(ValueError):
        TypeAdapter(Shape).validate_python({"type": "Triangle", "side": 1})
