from typing import Any

import pytest


def approx(
    expected: Any,
    rel: float | None = None,
    abs: float | None = None,
) -> Any:
    """
    Loosely typed wrapper around approx, for comparing knots that have been
    shifted by a float offset.
    See: https://github.com/pytest-dev/pytest/issues/7469

    Args:
        expected: Expected value, scalar or sequence
        rel: Relative tolerance. Defaults to None.
        abs: Absolute tolerance. Defaults to None.

    Returns:
        Any: Approximate comparator
    """

    return pytest.approx(expected, rel=rel, abs=abs)  # type: ignore
