"""Best rational approximation of floating values by continued fractions.

The expansion follows the classical recurrence::

    Z1 = X
    D0 = 0, D1 = 1
    repeat:
        Zi+1 = 1 / (Zi - INT(Zi))
        Di+1 = Di * INT(Zi+1) + Di-1
        Ni+1 = ROUND(X * Di+1)

until ``Ni+1 / Di+1`` is within the requested accuracy of ``X``, the expansion
terminates, or the next convergent no longer fits the integer representation.
Every step is evaluated in the floating representation of the target
fraction, so a ``float32`` approximation behaves differently from a
``float64`` one for the same input.
"""
from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from .config import get_config, validate_accuracy, validate_overflow_policy
from .integers import Representation

logger = logging.getLogger(__name__)


class ApproximationOverflowError(OverflowError):
    """Raised when a convergent leaves the integer range and truncation is disabled.

    ``estimate`` holds the last convergent that still fitted, as a
    ``(numerator, denominator)`` pair.
    """

    def __init__(self, value: float, representation: Representation, estimate: Tuple[int, int]):
        self.value = value
        self.representation = representation
        self.estimate = estimate
        super().__init__(
            f"approximating {value!r} overflows {representation.int_type}; "
            f"last estimate was {estimate[0]}/{estimate[1]}"
        )


def _round_half_away(value: np.floating) -> np.floating:
    floor = np.floor(value)
    if value - floor >= value.dtype.type(0.5):
        return floor + value.dtype.type(1)
    return floor


def _exceeds(value: np.floating, representation: Representation) -> bool:
    return not np.isfinite(value) or int(value) > representation.max_int


def approximate(
    value: float,
    representation: Representation,
    *,
    accuracy: Optional[float] = None,
    on_overflow: Optional[str] = None,
) -> Tuple[int, int]:
    """Return ``(numerator, denominator)`` approximating *value*.

    The pair is not necessarily reduced; callers pass it through the usual
    fraction canonicalisation.
    """
    config = get_config()
    accuracy = validate_accuracy(config.accuracy if accuracy is None else accuracy)
    on_overflow = validate_overflow_policy(config.on_overflow if on_overflow is None else on_overflow)

    ftype = representation.float_type.type
    with np.errstate(over="ignore"):
        decimal = ftype(value)
    if not np.isfinite(decimal):
        raise ValueError(f"cannot convert {value!r} to a fraction over {representation.float_type}")

    zero, one = ftype(0), ftype(1)
    tolerance = ftype(accuracy)
    sign = 1 if decimal >= zero else -1
    magnitude = np.abs(decimal)

    if magnitude == np.floor(magnitude):
        whole = int(magnitude)
        if whole > representation.max_int:
            raise OverflowError(f"{value!r} does not fit {representation.int_type}")
        return sign * whole, 1

    z = magnitude
    d_prev, d_cur = zero, one
    n_cur = zero
    with np.errstate(divide="ignore", over="ignore", invalid="ignore"):
        while True:
            remainder = z - np.floor(z)
            if remainder == zero:
                # Expansion terminated; the current convergent is exact.
                break
            z_next = one / remainder
            d_next = d_cur * np.floor(z_next) + d_prev
            n_next = _round_half_away(magnitude * d_next)

            if _exceeds(n_next, representation) or _exceeds(d_next, representation):
                estimate = (sign * int(n_cur), int(d_cur))
                if on_overflow == "raise":
                    raise ApproximationOverflowError(value, representation, estimate)
                logger.debug(
                    "Convergent for %r exceeds %s, keeping %d/%d",
                    value,
                    representation.int_type,
                    *estimate,
                )
                return estimate

            z, d_prev, d_cur, n_cur = z_next, d_cur, d_next, n_next
            if np.abs(magnitude - n_cur / d_cur) <= tolerance:
                break

    return sign * int(n_cur), int(d_cur)


__all__ = ["ApproximationOverflowError", "approximate"]
