from collections.abc import Mapping
from typing import Any

import pytest
from pydantic import BaseModel, TypeAdapter, ValidationError

from interpknots.boundary import (
    BoundaryPolicy,
    Directional,
    NoRepeat,
    Periodic,
    Reflect,
    parse_policy,
)
from interpknots.core import IteratorSize
from interpknots.errors import ConfigurationError


class Axis(BaseModel):
    knots: list[float]
    policy: BoundaryPolicy


@pytest.mark.parametrize(
    "policy,size",
    [
        (NoRepeat(), IteratorSize.HAS_LENGTH),
        (Periodic(), IteratorSize.IS_INFINITE),
        (Reflect(), IteratorSize.IS_INFINITE),
        (Directional(Periodic(), NoRepeat()), IteratorSize.HAS_LENGTH),
        (Directional(NoRepeat(), Reflect()), IteratorSize.IS_INFINITE),
    ],
)
def test_iterator_size(policy: BoundaryPolicy, size: IteratorSize) -> None:
    assert policy.iterator_size() == size
    assert policy.repeats() == (size == IteratorSize.IS_INFINITE)


def test_forward_policy() -> None:
    assert Periodic().forward_policy() == Periodic()
    assert Directional(Reflect(), NoRepeat()).forward_policy() == NoRepeat()


def test_base_policy_not_implemented() -> None:
    with pytest.raises(NotImplementedError):
        BoundaryPolicy().iterator_size()


def test_policies_are_frozen() -> None:
    policy = Directional(Reflect(), NoRepeat())
    with pytest.raises(AttributeError):
        policy.forward = Periodic()  # type: ignore


@pytest.mark.parametrize(
    "policy,serialized",
    [
        (NoRepeat(), {"type": "NoRepeat"}),
        (Periodic(), {"type": "Periodic"}),
        (Reflect(), {"type": "Reflect"}),
        (
            Directional(NoRepeat(), Periodic()),
            {
                "type": "Directional",
                "backward": {"type": "NoRepeat"},
                "forward": {"type": "Periodic"},
            },
        ),
    ],
)
def test_policy_serializes(
    policy: BoundaryPolicy, serialized: Mapping[str, Any]
) -> None:
    assert policy.serialize() == serialized
    assert BoundaryPolicy.deserialize(serialized) == policy


def test_unknown_policy_does_not_deserialize() -> None:
    with pytest.raises(ValidationError):
        BoundaryPolicy.deserialize({"type": "Sideways"})


def test_directional_members_are_not_directional() -> None:
    with pytest.raises(ValidationError):
        BoundaryPolicy.deserialize(
            {
                "type": "Directional",
                "backward": {"type": "NoRepeat"},
                "forward": {
                    "type": "Directional",
                    "backward": {"type": "NoRepeat"},
                    "forward": {"type": "Periodic"},
                },
            }
        )


def test_extra_fields_forbidden() -> None:
    with pytest.raises(ValidationError):
        BoundaryPolicy.deserialize({"type": "Periodic", "period": 3})


def test_policy_in_model() -> None:
    axis = Axis(knots=[0, 1, 2], policy=Directional(Reflect(), Periodic()))
    as_json = axis.model_dump_json()
    assert Axis.model_validate_json(as_json) == axis
    assert TypeAdapter(Axis).validate_python(axis.model_dump()) == axis


@pytest.mark.parametrize(
    "name,policy",
    [
        ("norepeat", NoRepeat()),
        ("Throw", NoRepeat()),
        ("flat", NoRepeat()),
        ("line", NoRepeat()),
        ("PERIODIC", Periodic()),
        (" reflect ", Reflect()),
        ("flat:reflect", Directional(NoRepeat(), Reflect())),
        ("periodic:line", Directional(Periodic(), NoRepeat())),
    ],
)
def test_parse_policy(name: str, policy: BoundaryPolicy) -> None:
    assert parse_policy(name) == policy


@pytest.mark.parametrize("name", ["", "mirror", "flat:", "a:b:c"])
def test_parse_bad_policy(name: str) -> None:
    with pytest.raises(ConfigurationError):
        parse_policy(name)
