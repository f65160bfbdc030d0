"""Integer helpers and numeric representation handling."""
from __future__ import annotations

import numbers
from typing import Any, NamedTuple

import numpy as np

DTypeLike = Any


def gcd(a: int, b: int) -> int:
    """Return the greatest common divisor of ``|a|`` and ``|b|``.

    ``gcd(0, x)`` is ``|x|``; ``gcd(0, 0)`` is ``0``.
    """
    a, b = abs(int(a)), abs(int(b))
    while b:
        a, b = b, a % b
    return a


def resolve_int_type(value: DTypeLike) -> np.dtype:
    """Return *value* as a signed integer :class:`numpy.dtype`."""
    try:
        dtype = np.dtype(value)
    except TypeError as exc:
        raise ValueError(f"invalid integer representation {value!r}") from exc
    if dtype.kind != "i":
        raise ValueError(f"integer representation must be a signed integer dtype, got {dtype}")
    return dtype


def resolve_float_type(value: DTypeLike) -> np.dtype:
    """Return *value* as a floating :class:`numpy.dtype`."""
    try:
        dtype = np.dtype(value)
    except TypeError as exc:
        raise ValueError(f"invalid floating representation {value!r}") from exc
    if dtype.kind != "f":
        raise ValueError(f"floating representation must be a floating dtype, got {dtype}")
    return dtype


class Representation(NamedTuple):
    """Integer/floating dtype pair a :class:`~numfrac.Fraction` is stored in."""

    int_type: np.dtype
    float_type: np.dtype

    @classmethod
    def resolve(cls, int_type: DTypeLike, float_type: DTypeLike) -> "Representation":
        return cls(resolve_int_type(int_type), resolve_float_type(float_type))

    @property
    def max_int(self) -> int:
        return int(np.iinfo(self.int_type).max)

    @property
    def min_int(self) -> int:
        # Symmetric range: every representable value can be negated.
        return -self.max_int

    def fits(self, value: int) -> bool:
        return self.min_int <= value <= self.max_int

    def promote(self, other: "Representation") -> "Representation":
        """Widen both dtypes the way NumPy promotes mixed operands."""
        if self == other:
            return self
        return Representation(
            resolve_int_type(np.promote_types(self.int_type, other.int_type)),
            resolve_float_type(np.promote_types(self.float_type, other.float_type)),
        )

    def __str__(self) -> str:
        return f"{self.int_type}/{self.float_type}"


def ensure_int(value: Any, *, name: str) -> int:
    """Convert *value* to ``int`` when it represents an integer."""
    if isinstance(value, numbers.Integral):
        return int(value)
    raise TypeError(f"{name} must be an integer, got {type(value)!r}")


__all__ = [
    "Representation",
    "ensure_int",
    "gcd",
    "resolve_float_type",
    "resolve_int_type",
]
