"""Engine facade: owns the configuration and dispatches value operations.

The evaluator hands the engine raw requests of the form
``(operation_name, target, *args)``. The engine picks the operation for the
target's kind, normalizes index arguments, and runs it through the guards
built from its configuration.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Protocol, runtime_checkable

from script_values import blob as blob_ops
from script_values import text as text_ops
from script_values.arithmetic import ArithmeticGuard
from script_values.bitfield import BitFieldAccessor
from script_values.config import EngineConfig
from script_values.errors import ConfigurationError, UnsupportedOperation
from script_values.indexing import CountRange, IndexRange, IndexSpec, stepped_range
from script_values.parsing import parse_index
from script_values.size_guard import DataSizes, SizeGuard
from script_values.slicing import SliceEngine
from script_values.types import (
    ArrayValue,
    BlobValue,
    SequenceValue,
    TextValue,
    is_integer,
)

logger = logging.getLogger(__name__)

_ARITHMETIC_OPS = {
    "+": "checked_add",
    "-": "checked_sub",
    "*": "checked_mul",
    "/": "checked_div",
    "%": "checked_rem",
    "**": "checked_pow",
    "<<": "checked_shl",
    ">>": "checked_shr",
}


@runtime_checkable
class Indexable(Protocol):
    """Capability for host-defined values that support ``value[key]``."""

    def index_get(self, key: Any) -> Any: ...

    def index_set(self, key: Any, value: Any) -> None: ...


def _is_range(key: Any) -> bool:
    return isinstance(key, (IndexRange, CountRange, range))


class Engine:
    """One engine instance per embedding; configuration is fixed during an evaluation."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._evaluating = False
        self._apply(config or EngineConfig())

    def _apply(self, config: EngineConfig) -> None:
        self.config = config
        self.arith = ArithmeticGuard(config.int_width, config.unchecked)
        self.bits = BitFieldAccessor(config.int_width)
        self.size_guard = SizeGuard(config.limits, config.unchecked)
        self.slices = SliceEngine(self.size_guard)

    def configure(self, config: EngineConfig) -> None:
        """Replace the configuration. Only allowed between evaluations."""
        if self._evaluating:
            raise ConfigurationError("Cannot change engine configuration during an evaluation")
        logger.info(
            "Engine configured: int_width=%d unchecked=%s limits=%s",
            config.int_width.bits, config.unchecked, config.limits,
        )
        self._apply(config)

    @contextmanager
    def evaluation(self) -> Iterator[Engine]:
        """Mark an evaluation in progress; the configuration is frozen until it ends."""
        if self._evaluating:
            raise ConfigurationError("An evaluation is already in progress")
        self._evaluating = True
        try:
            yield self
        finally:
            self._evaluating = False

    # -- value construction ----------------------------------------------

    def make_array(self, items: list[Any] | None = None) -> ArrayValue:
        """Build an array literal, enforcing the size ceilings."""
        items = list(items or [])
        self.size_guard.check_growth(ArrayValue.kind, len(items), "array")
        array = ArrayValue(items)
        self.size_guard.check_aggregate(array, operation="array")
        return array

    def make_text(self, text: str = "") -> TextValue:
        value = TextValue(text)
        self.size_guard.check_growth(TextValue.kind, value.shallow_size, "string")
        return value

    def make_blob(self, data: bytes | bytearray | int = b"", filler: int = 0) -> BlobValue:
        """Build a blob from bytes, or of a given length filled with ``filler``."""
        if is_integer(data):
            self.size_guard.check_growth(BlobValue.kind, max(data, 0), "blob")
            return BlobValue(bytearray([filler & 0xFF]) * max(data, 0))
        self.size_guard.check_growth(BlobValue.kind, len(data), "blob")
        return BlobValue(bytearray(data))

    # -- guards ----------------------------------------------------------

    def check_aggregate(self, root: Any) -> None:
        self.size_guard.check_aggregate(root)

    def data_sizes(self, root: Any) -> DataSizes:
        return self.size_guard.data_sizes(root)

    def range(self, start: int | float, end: int | float, step: int | float = 1, inclusive: bool = False):
        """Return a stepped range iterator; bad steps raise ``InvalidRangeStep``."""
        return stepped_range(start, end, step, inclusive)

    # -- indexing --------------------------------------------------------

    @staticmethod
    def _key(key: Any) -> Any:
        if isinstance(key, str):
            return parse_index(key)
        return key

    def index_get(self, target: Any, key: Any) -> Any:
        """Evaluate ``target[key]``. Missing positions give ``None``."""
        if isinstance(target, SequenceValue):
            key = self._key(key)
            if _is_range(key):
                return self.slices.extract(target, key)
            return self.slices.get(target, key)
        if is_integer(target):
            key = self._key(key)
            if _is_range(key):
                return self.bits.get_bits(target, key)
            return self.bits.get_bit(target, key)
        if isinstance(target, Indexable):
            return target.index_get(key)
        raise UnsupportedOperation(f"Cannot index into {type(target).__name__}")

    def index_set(self, target: Any, key: Any, value: Any, root: Any = None) -> Any:
        """Evaluate ``target[key] = value`` and return the updated target.

        Integers are immutable, so for a bit-field the returned integer is the
        new value; sequences are updated in place and returned. ``root`` has
        the same meaning as in ``call``.
        """
        if isinstance(target, SequenceValue):
            key = self._key(key)
            if _is_range(key):
                self.slices.splice(target, key, value, root=root)
            else:
                self.slices.set(target, key, value, root=root)
            return target
        if is_integer(target):
            key = self._key(key)
            if _is_range(key):
                return self.bits.set_bits(target, key, value)
            return self.bits.set_bit(target, key, bool(value))
        if isinstance(target, Indexable):
            target.index_set(key, value)
            return target
        raise UnsupportedOperation(f"Cannot index into {type(target).__name__}")

    # -- dispatch --------------------------------------------------------

    def _range_args(self, args: tuple[Any, ...]) -> IndexSpec:
        """Turn ``(range)``, ``(start)`` or ``(start, count)`` into an index spec."""
        if len(args) == 1:
            return self._key(args[0])
        if len(args) == 2:
            return CountRange(args[0], args[1])
        raise TypeError(f"Expected a range, a start, or a start and count; got {len(args)} arguments")

    def call(self, operation: str, target: Any, *args: Any, root: Any = None) -> Any:
        """Run a named operation on ``target``.

        ``root`` is the outermost value that owns ``target`` (for example the
        variable holding an array that ``target`` is nested in). Growth of
        ``target`` is then checked against the aggregate of ``root``.
        """
        if operation in _ARITHMETIC_OPS:
            return getattr(self.arith, _ARITHMETIC_OPS[operation])(target, *args)
        if isinstance(target, SequenceValue):
            return self._call_sequence(operation, target, args, root)
        if is_integer(target):
            return self._call_integer(operation, target, args)
        if isinstance(target, float) and operation in ("neg", "abs", "to_int"):
            return self._call_integer(operation, target, args)
        logger.debug("Unsupported operation %s on %s", operation, type(target).__name__)
        raise UnsupportedOperation(f"Unknown operation '{operation}' for {type(target).__name__}")

    def _call_sequence(
        self,
        operation: str,
        target: SequenceValue,
        args: tuple[Any, ...],
        root: Any = None,
    ) -> Any:
        slices = self.slices
        if operation in ("len", "length"):
            return len(target)
        elif operation == "get":
            return slices.get(target, *args)
        elif operation == "set":
            return slices.set(target, *args, root=root)
        elif operation == "remove":
            return slices.remove(target, *args)
        elif operation == "insert":
            return slices.insert(target, *args, root=root)
        elif operation == "push":
            return slices.push(target, *args, root=root)
        elif operation == "append":
            return slices.append(target, *args, root=root)
        elif operation == "pop":
            return slices.pop(target, *args)
        elif operation == "shift":
            return slices.shift(target)
        elif operation == "truncate":
            return slices.truncate(target, *args)
        elif operation == "chop":
            return slices.chop(target, *args)
        elif operation == "pad":
            return slices.pad(target, *args, root=root)
        elif operation == "reverse":
            return slices.reverse(target)
        elif operation == "contains":
            return slices.contains(target, *args)
        elif operation == "split":
            return slices.split(target, *args)
        elif operation in ("extract", "sub_string"):
            return slices.extract(target, self._range_args(args))
        elif operation in ("crop", "retain"):
            return slices.crop(target, self._range_args(args))
        elif operation == "drain":
            return slices.drain(target, self._range_args(args))
        elif operation == "splice":
            if not args:
                raise TypeError("splice() requires a range and a replacement")
            return slices.splice(target, self._range_args(args[:-1]), args[-1], root=root)

        if isinstance(target, TextValue):
            if operation == "index_of":
                return text_ops.index_of(target, *args)
            elif operation == "trim":
                return text_ops.trim(target)
            elif operation == "to_upper":
                return text_ops.to_upper(target)
            elif operation == "to_lower":
                return text_ops.to_lower(target)
            elif operation == "byte_len":
                return text_ops.byte_len(target)
        elif operation == "index_of":
            return slices.index_of(target, *args)

        if isinstance(target, BlobValue):
            width = self.config.int_width
            if operation == "parse_le_int":
                return blob_ops.parse_le_int(target, self._range_args(args), width)
            elif operation == "parse_be_int":
                return blob_ops.parse_be_int(target, self._range_args(args), width)
            elif operation == "write_le_int":
                return blob_ops.write_le_int(target, self._range_args(args[:-1]), args[-1], width)
            elif operation == "write_be_int":
                return blob_ops.write_be_int(target, self._range_args(args[:-1]), args[-1], width)

        logger.debug("Unsupported operation %s on %s", operation, target.kind.value)
        raise UnsupportedOperation(f"Unknown {target.kind.value} operation: {operation}()")

    def _call_integer(self, operation: str, target: int | float, args: tuple[Any, ...]) -> Any:
        bits = self.bits
        if operation == "get_bit":
            return bits.get_bit(target, *args)
        elif operation == "set_bit":
            return bits.set_bit(target, *args)
        elif operation == "get_bits":
            return bits.get_bits(target, self._bit_range_args(args))
        elif operation == "set_bits":
            return bits.set_bits(target, self._bit_range_args(args[:-1]), args[-1])
        elif operation == "bits":
            return list(bits.iter_bits(target, self._bit_range_args(args) if args else None))
        elif operation == "count_ones":
            return bits.count_ones(target)
        elif operation == "count_zeros":
            return bits.count_zeros(target)
        elif operation == "neg":
            return self.arith.checked_neg(target)
        elif operation == "abs":
            return self.arith.checked_abs(target)
        elif operation == "to_int":
            if isinstance(target, float):
                return self.arith.checked_float_to_int(target)
            return target
        logger.debug("Unsupported operation %s on integer", operation)
        raise UnsupportedOperation(f"Unknown integer operation: {operation}()")

    def _bit_range_args(self, args: tuple[Any, ...]) -> IndexSpec:
        if len(args) == 1:
            return self._key(args[0])
        if len(args) == 2:
            return CountRange(args[0], args[1])
        raise TypeError(f"Expected a bit range, a start, or a start and count; got {len(args)} arguments")
