"""Package-wide defaults for fraction construction and approximation."""
from __future__ import annotations

import dataclasses
import logging
import math
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

from .integers import Representation, resolve_float_type, resolve_int_type

logger = logging.getLogger(__name__)

OVERFLOW_POLICIES = ("truncate", "raise")

DEFAULT_ACCURACY = 1e-19


@dataclass(frozen=True)
class Config:
    """Defaults used whenever a call does not pass its own options.

    ``accuracy`` bounds the absolute error accepted by the decimal to fraction
    converter. ``on_overflow`` selects what happens when the next convergent no
    longer fits the integer representation: ``"truncate"`` keeps the last good
    estimate, ``"raise"`` raises :class:`~numfrac.ApproximationOverflowError`.
    """

    accuracy: float = DEFAULT_ACCURACY
    int_type: str = "int32"
    float_type: str = "float32"
    on_overflow: str = "truncate"

    def __post_init__(self) -> None:
        validate_accuracy(self.accuracy)
        validate_overflow_policy(self.on_overflow)
        # Normalise dtype-likes (np.int64, "i8", ...) to their canonical names.
        object.__setattr__(self, "int_type", resolve_int_type(self.int_type).name)
        object.__setattr__(self, "float_type", resolve_float_type(self.float_type).name)

    @property
    def representation(self) -> Representation:
        return Representation.resolve(self.int_type, self.float_type)


def validate_accuracy(accuracy: float) -> float:
    accuracy = float(accuracy)
    if not math.isfinite(accuracy) or accuracy <= 0:
        raise ValueError(f"accuracy must be a positive finite number, got {accuracy!r}")
    return accuracy


def validate_overflow_policy(policy: str) -> str:
    if policy not in OVERFLOW_POLICIES:
        raise ValueError(
            f"on_overflow must be one of {', '.join(OVERFLOW_POLICIES)}, got {policy!r}"
        )
    return policy


_active = Config()


def get_config() -> Config:
    """Return the active defaults."""
    return _active


def configure(**overrides: Any) -> Config:
    """Replace the active defaults with *overrides* applied, and return them."""
    global _active
    unknown = set(overrides) - {field.name for field in dataclasses.fields(Config)}
    if unknown:
        raise TypeError(f"unknown configuration keys: {', '.join(sorted(unknown))}")
    _active = dataclasses.replace(_active, **overrides)
    return _active


def reset_config() -> Config:
    """Restore the built-in defaults."""
    global _active
    _active = Config()
    return _active


def load_config(path: Union[str, Path]) -> Config:
    """Activate the defaults stored in the TOML file at *path*.

    Keys are read from a ``[numfrac]`` table when present, otherwise from the
    top level of the document. Missing keys keep their built-in defaults.
    """
    global _active
    config_path = Path(path).expanduser()
    with config_path.open("rb") as handle:
        document: Dict[str, Any] = tomllib.load(handle)
    section = document.get("numfrac", document)
    if not isinstance(section, dict):
        raise ValueError(f"[numfrac] in {config_path} must be a table")

    known = {field.name for field in dataclasses.fields(Config)}
    ignored = sorted(set(section) - known)
    if ignored:
        logger.warning("Ignoring unknown keys in %s: %s", config_path, ", ".join(ignored))

    _active = Config(**{key: value for key, value in section.items() if key in known})
    logger.info("Loaded fraction defaults from %s (%s)", config_path, _active.representation)
    return _active


__all__ = [
    "Config",
    "DEFAULT_ACCURACY",
    "OVERFLOW_POLICIES",
    "configure",
    "get_config",
    "load_config",
    "reset_config",
]
