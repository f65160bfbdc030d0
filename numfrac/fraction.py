"""Fixed-width fraction type with NumPy interoperability."""
from __future__ import annotations

import fractions
import math
import numbers
import operator
from typing import Any, Optional, Tuple, Union

import numpy as np

from .approximation import approximate
from .config import get_config
from .integers import DTypeLike, Representation, ensure_int, gcd

NumberLike = Union["Fraction", fractions.Fraction, numbers.Real]


def _representation(int_type: Optional[DTypeLike], float_type: Optional[DTypeLike]) -> Representation:
    config = get_config()
    return Representation.resolve(
        config.int_type if int_type is None else int_type,
        config.float_type if float_type is None else float_type,
    )


class Fraction:
    """Rational number ``n/d`` kept in canonical form over a fixed-width integer.

    The denominator is always positive, numerator and denominator are coprime
    and zero is stored as ``0/1``. Both components must fit the integer
    representation (a signed NumPy integer dtype); arithmetic is carried out
    exactly and a reduced result that leaves that range raises
    :class:`OverflowError` instead of wrapping around.

    Equality with a float goes through the same approximation as
    construction, so ``x == Fraction(x)`` can hold for floats with no exact
    ratio in range. :meth:`__hash__` follows :class:`fractions.Fraction`, so
    such a float and its Fraction do not share a hash; only exactly equal
    values do. Values that cannot be converted (NaN, infinities, numbers
    outside the integer range) compare unequal.

    A single non-integral real argument is approximated with
    :func:`decimal_to_fraction`::

        >>> Fraction(2, -4)
        Fraction(-1, 2)
        >>> Fraction(0.263157894737)
        Fraction(5, 19)
    """

    __slots__ = ("_numerator", "_denominator", "_representation")
    __array_priority__ = 1000.0  # Prefer Fraction semantics in NumPy expressions.

    def __init__(
        self,
        numerator: Any = 0,
        denominator: Any = None,
        *,
        int_type: Optional[DTypeLike] = None,
        float_type: Optional[DTypeLike] = None,
    ) -> None:
        if denominator is None and isinstance(numerator, Fraction):
            rep = Representation.resolve(
                numerator.int_type if int_type is None else int_type,
                numerator.float_type if float_type is None else float_type,
            )
            num, den = numerator._numerator, numerator._denominator
        else:
            rep = _representation(int_type, float_type)
            if denominator is None:
                num, den = self._components(numerator, rep)
            else:
                num = ensure_int(numerator, name="numerator")
                den = ensure_int(denominator, name="denominator")

        self._numerator, self._denominator = self._normalize(num, den, rep)
        self._representation = rep

    # ------------------------------------------------------------------
    # Constructors
    @classmethod
    def from_float(
        cls,
        value: float,
        *,
        accuracy: Optional[float] = None,
        on_overflow: Optional[str] = None,
        int_type: Optional[DTypeLike] = None,
        float_type: Optional[DTypeLike] = None,
    ) -> "Fraction":
        """Return the best approximation of *value* within *accuracy*."""
        rep = _representation(int_type, float_type)
        if isinstance(value, bool):  # bool is a subclass of int; treat explicitly.
            return cls(int(value), 1, int_type=rep.int_type, float_type=rep.float_type)
        num, den = approximate(value, rep, accuracy=accuracy, on_overflow=on_overflow)
        return cls(num, den, int_type=rep.int_type, float_type=rep.float_type)

    @classmethod
    def from_fraction(
        cls,
        value: fractions.Fraction,
        *,
        int_type: Optional[DTypeLike] = None,
        float_type: Optional[DTypeLike] = None,
    ) -> "Fraction":
        """Create a :class:`Fraction` from :class:`fractions.Fraction` exactly."""
        return cls(value.numerator, value.denominator, int_type=int_type, float_type=float_type)

    @classmethod
    def coerce(
        cls,
        value: NumberLike,
        *,
        int_type: Optional[DTypeLike] = None,
        float_type: Optional[DTypeLike] = None,
    ) -> "Fraction":
        """Coerce a numeric-like value into :class:`Fraction`."""
        if isinstance(value, Fraction):
            if int_type is None and float_type is None:
                return value
            return value.astype(int_type, float_type)
        if isinstance(value, fractions.Fraction):
            return cls.from_fraction(value, int_type=int_type, float_type=float_type)
        if isinstance(value, numbers.Integral):
            return cls(int(value), 1, int_type=int_type, float_type=float_type)
        if isinstance(value, np.generic):
            return cls.coerce(value.item(), int_type=int_type, float_type=float_type)
        if isinstance(value, numbers.Real):
            return cls.from_float(value, int_type=int_type, float_type=float_type)
        raise TypeError(f"Cannot convert {type(value)!r} to Fraction")

    def astype(
        self,
        int_type: Optional[DTypeLike] = None,
        float_type: Optional[DTypeLike] = None,
    ) -> "Fraction":
        """Return this value in another integer/floating representation."""
        return Fraction(self, int_type=int_type, float_type=float_type)

    # ------------------------------------------------------------------
    # Properties and helpers
    @property
    def numerator(self) -> np.signedinteger:
        return self._representation.int_type.type(self._numerator)

    @property
    def denominator(self) -> np.signedinteger:
        return self._representation.int_type.type(self._denominator)

    n = numerator
    d = denominator

    @property
    def int_type(self) -> np.dtype:
        return self._representation.int_type

    @property
    def float_type(self) -> np.dtype:
        return self._representation.float_type

    @property
    def representation(self) -> Representation:
        return self._representation

    def value(self) -> np.floating:
        """Return ``n / d`` in the floating representation."""
        ftype = self._representation.float_type.type
        return ftype(self._numerator) / ftype(self._denominator)

    def as_integer_ratio(self) -> Tuple[int, int]:
        return self._numerator, self._denominator

    def as_fraction(self) -> fractions.Fraction:
        """Return a :class:`fractions.Fraction` with the same value."""
        return fractions.Fraction(self._numerator, self._denominator)

    def reciprocal(self) -> "Fraction":
        return reciprocal(self)

    # ------------------------------------------------------------------
    # Numeric protocol
    def __float__(self) -> float:
        return float(self.value())

    def __int__(self) -> int:
        quotient = abs(self._numerator) // self._denominator
        return -quotient if self._numerator < 0 else quotient

    def __bool__(self) -> bool:
        return self._numerator != 0

    # ------------------------------------------------------------------
    # Representation
    def __repr__(self) -> str:
        default = get_config().representation
        if self._representation == default:
            return f"Fraction({self._numerator}, {self._denominator})"
        return (
            f"Fraction({self._numerator}, {self._denominator}, "
            f"int_type='{self.int_type}', float_type='{self.float_type}')"
        )

    def __str__(self) -> str:
        if self._denominator == 1:
            return str(self._numerator)
        return f"{self._numerator}/{self._denominator}"

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "r", "R"):
            return str(self)
        try:
            return format(float(self), format_spec)
        except (ValueError, TypeError):
            return format(str(self), format_spec)

    # ------------------------------------------------------------------
    # Internal helpers
    @staticmethod
    def _components(value: Any, rep: Representation) -> Tuple[int, int]:
        if isinstance(value, fractions.Fraction):
            return value.numerator, value.denominator
        if isinstance(value, numbers.Integral):
            return int(value), 1
        if isinstance(value, np.generic):
            return Fraction._components(value.item(), rep)
        if isinstance(value, numbers.Real):
            return approximate(value, rep)
        raise TypeError(f"Cannot interpret {type(value)!r} as Fraction")

    @staticmethod
    def _normalize(num: int, den: int, rep: Representation) -> Tuple[int, int]:
        if den == 0:
            raise ZeroDivisionError("division by zero")
        if num == 0:
            return 0, 1
        sign = -1 if (num < 0) != (den < 0) else 1
        num, den = abs(num), abs(den)
        g = gcd(num, den)
        num = sign * (num // g)
        den //= g
        if not (rep.fits(num) and rep.fits(den)):
            raise OverflowError(f"{num}/{den} does not fit {rep.int_type}")
        return num, den

    def _coerce_scalar(self, value: Any) -> "Fraction":
        if isinstance(value, Fraction):
            return value
        return Fraction.coerce(value, int_type=self.int_type, float_type=self.float_type)

    def _vectorize_iterable(self, iterable, func):
        return np.array([func(item) for item in iterable], dtype=object)

    def _binary_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self, self._coerce_scalar(x)),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return self._vectorize_iterable(
                other,
                lambda x: op(self, self._coerce_scalar(x)),
            )
        other_frac = self._coerce_scalar(other)
        return op(self, other_frac)

    def _reflected_operation(self, other: Any, op):
        if isinstance(other, np.ndarray):
            vectorised = np.vectorize(
                lambda x: op(self._coerce_scalar(x), self),
                otypes=[object],
            )
            return vectorised(other)
        if isinstance(other, (list, tuple)):
            return self._vectorize_iterable(
                other,
                lambda x: op(self._coerce_scalar(x), self),
            )
        return op(self._coerce_scalar(other), self)

    def _in_place(self, other: Any, op) -> Any:
        # The left operand keeps its representation; arrays still broadcast.
        if isinstance(other, (np.ndarray, list, tuple)):
            return self._binary_operation(other, op)
        result = op(self, self._coerce_scalar(other))
        if result._representation == self._representation:
            return result
        return result.astype(self.int_type, self.float_type)

    def _integral_exponent(self, value: Any) -> Optional[int]:
        """Return *value* as an ``int`` exponent, or ``None`` when it is non-integral."""
        if isinstance(value, numbers.Integral):
            return int(value)
        if isinstance(value, Fraction):
            return value._numerator if value._denominator == 1 else None
        if isinstance(value, np.generic):
            return self._integral_exponent(value.item())
        if isinstance(value, fractions.Fraction):
            return value.numerator if value.denominator == 1 else None
        if isinstance(value, numbers.Real):
            return int(value) if float(value).is_integer() else None
        raise TypeError("Unsupported exponent type")

    # ------------------------------------------------------------------
    # Arithmetic operators
    def __add__(self, other: Any) -> Any:
        return self._binary_operation(other, _add)

    def __radd__(self, other: Any) -> Any:
        return self._reflected_operation(other, _add)

    def __iadd__(self, other: Any) -> "Fraction":
        return self._in_place(other, _add)

    def __sub__(self, other: Any) -> Any:
        return self._binary_operation(other, _sub)

    def __rsub__(self, other: Any) -> Any:
        return self._reflected_operation(other, _sub)

    def __isub__(self, other: Any) -> "Fraction":
        return self._in_place(other, _sub)

    def __mul__(self, other: Any) -> Any:
        return self._binary_operation(other, _mul)

    def __rmul__(self, other: Any) -> Any:
        return self._reflected_operation(other, _mul)

    def __imul__(self, other: Any) -> "Fraction":
        return self._in_place(other, _mul)

    def __truediv__(self, other: Any) -> Any:
        return self._binary_operation(other, _truediv)

    def __rtruediv__(self, other: Any) -> Any:
        return self._reflected_operation(other, _truediv)

    def __itruediv__(self, other: Any) -> "Fraction":
        return self._in_place(other, _truediv)

    def __pow__(self, exponent: Any) -> Any:
        """Raise to *exponent*.

        Integral exponents give an exact :class:`Fraction`. Any other real
        exponent is applied to :meth:`value`, giving a scalar of the floating
        representation.
        """
        if isinstance(exponent, np.ndarray):
            vectorised = np.vectorize(lambda x: self.__pow__(x), otypes=[object])
            return vectorised(exponent)
        power = self._integral_exponent(exponent)
        rep = self._representation
        if power is None:
            ftype = rep.float_type.type
            return self.value() ** ftype(float(exponent))
        if power >= 0:
            return Fraction(
                self._numerator ** power,
                self._denominator ** power,
                int_type=rep.int_type,
                float_type=rep.float_type,
            )
        if self._numerator == 0:
            raise ZeroDivisionError("0 cannot be raised to a negative power")
        return reciprocal(self) ** -power

    def __rpow__(self, base: Any) -> Any:
        if not isinstance(base, (numbers.Real, np.generic)):
            return NotImplemented
        if self._denominator == 1:
            return self._coerce_scalar(base) ** self._numerator
        ftype = self._representation.float_type.type
        return ftype(float(base)) ** self.value()

    def __neg__(self) -> "Fraction":
        return Fraction(
            -self._numerator,
            self._denominator,
            int_type=self.int_type,
            float_type=self.float_type,
        )

    def __pos__(self) -> "Fraction":
        return self

    def __abs__(self) -> "Fraction":
        return Fraction(
            abs(self._numerator),
            self._denominator,
            int_type=self.int_type,
            float_type=self.float_type,
        )

    # ------------------------------------------------------------------
    # Comparisons
    def _compare(self, other: Any, op) -> bool:
        other_frac = self._coerce_scalar(other)
        return op(
            self._numerator * other_frac._denominator,
            other_frac._numerator * self._denominator,
        )

    def __eq__(self, other: Any) -> bool:
        # Canonical form makes component-wise comparison exact.
        try:
            other_frac = self._coerce_scalar(other)
        except (TypeError, ValueError, OverflowError):
            # NaN, infinities and values outside the integer range equal no Fraction.
            return False
        return (
            self._numerator == other_frac._numerator
            and self._denominator == other_frac._denominator
        )

    def __lt__(self, other: Any) -> bool:
        return self._compare(other, operator.lt)

    def __le__(self, other: Any) -> bool:
        return self._compare(other, operator.le)

    def __gt__(self, other: Any) -> bool:
        return self._compare(other, operator.gt)

    def __ge__(self, other: Any) -> bool:
        return self._compare(other, operator.ge)

    def __hash__(self) -> int:
        # Matches hash() of exactly equal ints, floats and fractions.Fraction
        # values. A float that only compares equal through approximation
        # hashes differently.
        return hash(fractions.Fraction(self._numerator, self._denominator))

    # ------------------------------------------------------------------
    # NumPy interoperability
    _UFUNC_DISPATCH = {
        np.add: operator.add,
        np.subtract: operator.sub,
        np.multiply: operator.mul,
        np.divide: operator.truediv,
        np.true_divide: operator.truediv,
        np.negative: operator.neg,
        np.positive: operator.pos,
        np.absolute: abs,
        np.power: operator.pow,
        np.reciprocal: lambda a: reciprocal(a),
    }

    def __array_ufunc__(self, ufunc, method, *inputs, **kwargs):
        """Evaluate NumPy ufuncs on Fractions with exact arithmetic.

        Handles plain calls of ``add``, ``subtract``, ``multiply``,
        ``divide``/``true_divide``, ``negative``, ``positive``, ``absolute``,
        ``power`` and ``reciprocal`` (``np.reciprocal`` on a Fraction gives
        ``1/f`` rather than NumPy's integer reciprocal). Non-Fraction operands
        are converted in this Fraction's representation; array operands are
        converted element-wise and the result is an object array of
        Fractions. Any other ufunc or method (``reduce``, ``outer`` ...)
        returns ``NotImplemented``; ``out=`` is not supported.
        """
        op = self._UFUNC_DISPATCH.get(ufunc)
        if method != "__call__" or op is None:
            return NotImplemented
        if kwargs.get("out") is not None:
            raise NotImplementedError("`out` argument is not supported for Fraction ufuncs")

        to_fraction = np.vectorize(self._coerce_scalar, otypes=[object])
        operands = [
            to_fraction(value) if isinstance(value, np.ndarray) else self._coerce_scalar(value)
            for value in inputs
        ]
        if any(isinstance(value, np.ndarray) for value in operands):
            return np.vectorize(op, otypes=[object])(*operands)
        return op(*operands)


def _result_representation(a: Fraction, b: Fraction) -> Representation:
    return a.representation.promote(b.representation)


def _add(a: Fraction, b: Fraction) -> Fraction:
    rep = _result_representation(a, b)
    return Fraction(
        a._numerator * b._denominator + b._numerator * a._denominator,
        a._denominator * b._denominator,
        int_type=rep.int_type,
        float_type=rep.float_type,
    )


def _sub(a: Fraction, b: Fraction) -> Fraction:
    return _add(a, -b)


def _mul(a: Fraction, b: Fraction) -> Fraction:
    rep = _result_representation(a, b)
    return Fraction(
        a._numerator * b._numerator,
        a._denominator * b._denominator,
        int_type=rep.int_type,
        float_type=rep.float_type,
    )


def _truediv(a: Fraction, b: Fraction) -> Fraction:
    return _mul(a, reciprocal(b))


def reciprocal(value: NumberLike) -> Fraction:
    """Return ``1 / value``; raises :class:`ZeroDivisionError` for zero."""
    value = Fraction.coerce(value)
    if value._numerator == 0:
        raise ZeroDivisionError("division by zero")
    sign = -1 if value._numerator < 0 else 1
    return Fraction(
        sign * value._denominator,
        abs(value._numerator),
        int_type=value.int_type,
        float_type=value.float_type,
    )


def decimal_to_fraction(
    value: float,
    accuracy: Optional[float] = None,
    *,
    on_overflow: Optional[str] = None,
    int_type: Optional[DTypeLike] = None,
    float_type: Optional[DTypeLike] = None,
) -> Fraction:
    """Approximate *value* by continued fractions within *accuracy*.

    Convergents are generated until one lies within *accuracy* of *value* or
    the expansion terminates. When the next convergent would not fit the
    integer representation, the previous one is returned
    (``on_overflow="truncate"``) or
    :class:`~numfrac.ApproximationOverflowError` is raised
    (``on_overflow="raise"``). NaN and infinity raise :class:`ValueError`.
    """
    if math.isnan(value) or math.isinf(value):
        raise ValueError("cannot convert NaN or infinity to Fraction")
    return Fraction.from_float(
        value,
        accuracy=accuracy,
        on_overflow=on_overflow,
        int_type=int_type,
        float_type=float_type,
    )


def as_fraction(
    value: NumberLike,
    *,
    int_type: Optional[DTypeLike] = None,
    float_type: Optional[DTypeLike] = None,
) -> Fraction:
    """Public helper to convert *value* into :class:`Fraction`."""

    return Fraction.coerce(value, int_type=int_type, float_type=float_type)


def as_fraction_array(
    values: Any,
    *,
    int_type: Optional[DTypeLike] = None,
    float_type: Optional[DTypeLike] = None,
    copy: bool = True,
) -> np.ndarray:
    """Return a ``numpy.ndarray`` of :class:`Fraction` values.

    ``values`` can be any iterable containing numeric-like entries or an existing
    NumPy array. When ``copy`` is ``False`` and ``values`` is already an object
    array holding only :class:`Fraction` instances, it is returned unchanged.
    """

    if isinstance(values, np.ndarray):
        array = values.copy() if copy else values
        if array.dtype == object and all(isinstance(item, Fraction) for item in array.flat):
            return array
        vectorised = np.vectorize(
            lambda item: Fraction.coerce(item, int_type=int_type, float_type=float_type),
            otypes=[object],
        )
        return vectorised(array)

    if isinstance(values, (list, tuple)):
        coerced = [
            Fraction.coerce(item, int_type=int_type, float_type=float_type) for item in values
        ]
        return np.array(coerced, dtype=object)

    return as_fraction_array(list(values), int_type=int_type, float_type=float_type, copy=copy)


def zeros(
    shape: Any,
    *,
    int_type: Optional[DTypeLike] = None,
    float_type: Optional[DTypeLike] = None,
) -> np.ndarray:
    """Return an object array of canonical zeros."""
    zero = Fraction(0, 1, int_type=int_type, float_type=float_type)
    array = np.empty(shape, dtype=object)
    array.fill(zero)
    return array


def zeros_like(values: Any) -> np.ndarray:
    """Return zeros shaped like *values*, in the representation of its first Fraction."""
    array = np.asarray(values, dtype=object)
    sample = next((item for item in array.flat if isinstance(item, Fraction)), None)
    if sample is None:
        return zeros(array.shape)
    return zeros(array.shape, int_type=sample.int_type, float_type=sample.float_type)


__all__ = [
    "Fraction",
    "as_fraction",
    "as_fraction_array",
    "decimal_to_fraction",
    "reciprocal",
    "zeros",
    "zeros_like",
]
