"""Engine configuration: size ceilings, integer width and checked mode."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from script_values.errors import ConfigurationError
from script_values.types import IntegerWidth, SequenceKind


@dataclass(frozen=True)
class SizeLimits:
    """Per-kind size ceilings. ``0`` means unlimited.

    ``max_string_size`` and ``max_blob_size`` are measured in bytes,
    ``max_array_size`` in elements.
    """

    max_array_size: int = 0
    max_string_size: int = 0
    max_blob_size: int = 0

    def __post_init__(self) -> None:
        for name in ("max_array_size", "max_string_size", "max_blob_size"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ConfigurationError(f"{name} must be a non-negative integer, got {value!r}")

    def limit_for(self, kind: SequenceKind) -> int:
        """Return the ceiling for a sequence kind."""
        if kind is SequenceKind.ARRAY:
            return self.max_array_size
        if kind is SequenceKind.TEXT:
            return self.max_string_size
        return self.max_blob_size

    @property
    def unlimited(self) -> bool:
        return not (self.max_array_size or self.max_string_size or self.max_blob_size)


@dataclass(frozen=True)
class EngineConfig:
    """Settings fixed for the lifetime of one evaluation.

    ``unchecked`` turns the arithmetic and size guards into pass-throughs:
    integer overflow wraps and size ceilings are ignored. It is never the
    default.
    """

    limits: SizeLimits = field(default_factory=SizeLimits)
    int_width: IntegerWidth = IntegerWidth.BITS_64
    unchecked: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.limits, SizeLimits):
            raise ConfigurationError(f"limits must be SizeLimits, got {type(self.limits).__name__}")
        if not isinstance(self.int_width, IntegerWidth):
            raise ConfigurationError(f"int_width must be IntegerWidth, got {self.int_width!r}")

    def with_limits(self, **limits: int) -> EngineConfig:
        """Return a copy with some size ceilings replaced."""
        try:
            new_limits = replace(self.limits, **limits)
        except TypeError as e:
            raise ConfigurationError(str(e)) from e
        return replace(self, limits=new_limits)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EngineConfig:
        """Build a configuration from a JSON-style mapping. Missing keys take defaults."""
        unknown = set(data) - {"limits", "int_width", "unchecked"}
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {sorted(unknown)}")

        limits_spec = data.get("limits", {})
        if not isinstance(limits_spec, dict):
            raise ConfigurationError("'limits' must be an object")
        try:
            limits = SizeLimits(**limits_spec)
        except TypeError as e:
            raise ConfigurationError(f"Invalid limits: {e}") from e

        try:
            int_width = IntegerWidth.from_bits(int(data.get("int_width", 64)))
        except (TypeError, ValueError) as e:
            raise ConfigurationError(str(e)) from e

        unchecked = data.get("unchecked", False)
        if not isinstance(unchecked, bool):
            raise ConfigurationError(f"'unchecked' must be a boolean, got {unchecked!r}")

        return cls(limits=limits, int_width=int_width, unchecked=unchecked)

    def to_dict(self) -> dict[str, Any]:
        return {
            "limits": {
                "max_array_size": self.limits.max_array_size,
                "max_string_size": self.limits.max_string_size,
                "max_blob_size": self.limits.max_blob_size,
            },
            "int_width": self.int_width.bits,
            "unchecked": self.unchecked,
        }


def load_config(path: Path | str) -> EngineConfig:
    """Load an engine configuration from a JSON file."""
    path = Path(path)
    try:
        with open(path) as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid configuration file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return EngineConfig.from_dict(data)
