"""Fixed-width fractions with continued-fraction float approximation."""

from .approximation import ApproximationOverflowError
from .config import Config, configure, get_config, load_config, reset_config
from .fraction import (
    Fraction,
    as_fraction,
    as_fraction_array,
    decimal_to_fraction,
    reciprocal,
    zeros,
    zeros_like,
)
from .integers import Representation, gcd

__all__ = [
    "ApproximationOverflowError",
    "Config",
    "Fraction",
    "Representation",
    "as_fraction",
    "as_fraction_array",
    "configure",
    "decimal_to_fraction",
    "gcd",
    "get_config",
    "load_config",
    "reciprocal",
    "reset_config",
    "zeros",
    "zeros_like",
]
