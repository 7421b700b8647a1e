"""Exceptions raised when building or querying knot iterators."""

__all__ = ["ConfigurationError", "UnsupportedOperation"]


class ConfigurationError(ValueError):
    """An iterator or grid was constructed from invalid knots or policies."""


class UnsupportedOperation(TypeError):
    """A finite-only operation like ``len`` was called on an infinite iterator.

    Subclasses `TypeError` so that ``len()`` and ``operator.length_hint``
    callers see the same failure as for an object with no length.
    """
