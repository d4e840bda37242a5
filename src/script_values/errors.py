"""Error conditions raised by the value core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from script_values.types import SequenceKind


class ScriptValueError(Exception):
    """Base class for every condition the value core signals."""


class ConfigurationError(ScriptValueError, ValueError):
    """Invalid engine configuration, or reconfiguration during an evaluation."""


class IndexInvalidNoOp(ScriptValueError):
    """A single position did not resolve.

    Never escapes the core: operations that receive it turn it into an
    absent value or a no-op.
    """

    def __init__(self, length: int, position: int) -> None:
        super().__init__(f"Position {position} out of bounds for length {length}")
        self.length = length
        self.position = position


class SizeLimitExceeded(ScriptValueError):
    """A growth operation would take a value past its configured ceiling."""

    def __init__(self, kind: SequenceKind, limit: int, size: int | None, operation: str | None = None) -> None:
        if size is None:
            message = f"Size limit exceeded: unbounded {kind.value} (cycle) exceeds maximum {limit}"
        else:
            message = f"Size limit exceeded: {kind.value} size {size} exceeds maximum {limit}"
        if operation:
            message += f" in {operation}()"
        super().__init__(message)
        self.kind = kind
        self.limit = limit
        self.size = size
        self.operation = operation


class ArithError(ScriptValueError, ArithmeticError):
    """Base class for checked-arithmetic failures."""


class ArithOverflow(ArithError):
    """An integer result does not fit the configured width."""


class DivideByZero(ArithError):
    """Division or remainder by zero."""


class InvalidFloatOp(ArithError):
    """A float operation produced infinity or NaN from finite inputs."""


class InvalidRangeStep(ScriptValueError, ValueError):
    """A stepped range has a zero, non-finite or wrongly signed step."""


class UnsupportedOperation(ScriptValueError, TypeError):
    """The requested operation does not exist for the target's kind."""
