"""Uniform get/set/slice/splice operations over sequence values.

The same code serves arrays (element units), text (character units) and
blobs (byte units). Every mutation builds the prospective contents first,
passes them through the size guard when the value can grow, and only then
stores them, so a rejected operation leaves the value untouched.
"""

from __future__ import annotations

from typing import Any

from script_values.errors import IndexInvalidNoOp
from script_values.indexing import (
    CountRange,
    IndexSpec,
    require_position,
    resolve_insert_position,
    resolve_position,
    resolve_range,
)
from script_values.size_guard import SizeGuard
from script_values.types import SequenceKind, SequenceValue, TextValue


def _require_sequence(value: Any) -> SequenceValue:
    if not isinstance(value, SequenceValue):
        raise TypeError(f"Expected an array, string or blob, got {type(value).__name__}")
    return value


class SliceEngine:
    """Sequence operations sharing one resolver contract and one size guard."""

    def __init__(self, size_guard: SizeGuard | None = None) -> None:
        self.size_guard = size_guard or SizeGuard()

    # -- internals -------------------------------------------------------

    def _unit_payload(self, target: SequenceValue, unit: Any) -> Any:
        """Return a one-unit payload (text accepts a whole string)."""
        if target.kind is SequenceKind.ARRAY:
            return [unit]
        if target.kind is SequenceKind.TEXT:
            return target.coerce_payload(unit)
        return target.coerce_payload(target.coerce_unit(unit))

    def _commit(
        self,
        target: SequenceValue,
        payload: Any,
        operation: str,
        inserted: Any = None,
        root: Any = None,
    ) -> None:
        """Store ``payload`` into ``target`` once the size guard accepts it.

        ``root`` is the outermost value owning ``target``. When given, the
        aggregate of the whole structure is checked with ``payload`` in place
        of ``target``'s current units.
        """
        grows = target.payload_size(payload) > target.shallow_size
        if not grows and target.kind is SequenceKind.ARRAY and inserted is not None:
            grows = any(isinstance(item, SequenceValue) for item in inserted)
        if grows:
            self.size_guard.check_payload(target, payload, operation)
            if root is not None and root is not target:
                self.size_guard.check_aggregate(root, {id(target): payload}, operation)
        target.store(payload)

    # -- single positions ------------------------------------------------

    def get(self, target: SequenceValue, pos: int) -> Any:
        """Return the unit at ``pos``, or ``None`` if the position does not exist."""
        target = _require_sequence(target)
        offset = resolve_position(len(target), pos)
        if offset is None:
            return None
        return target.unit_at(offset)

    def set(self, target: SequenceValue, pos: int, unit: Any, root: Any = None) -> None:
        """Replace the unit at ``pos``. Does nothing if the position does not exist."""
        target = _require_sequence(target)
        try:
            offset = require_position(len(target), pos)
        except IndexInvalidNoOp:
            return
        unit = target.coerce_unit(unit)
        single = self._unit_payload(target, unit)
        data = target.data
        payload = data[:offset] + single + data[offset + 1:]
        self._commit(target, payload, "set", single, root)

    def remove(self, target: SequenceValue, pos: int) -> Any:
        """Remove and return the unit at ``pos``, or ``None`` if it does not exist."""
        target = _require_sequence(target)
        try:
            offset = require_position(len(target), pos)
        except IndexInvalidNoOp:
            return None
        unit = target.unit_at(offset)
        target.replace(offset, 1, target.empty_payload())
        return unit

    def insert(self, target: SequenceValue, pos: int, unit: Any, root: Any = None) -> None:
        """Insert before ``pos``. Past the end appends; before the front prepends."""
        target = _require_sequence(target)
        offset = resolve_insert_position(len(target), pos)
        single = self._unit_payload(target, unit)
        data = target.data
        self._commit(target, data[:offset] + single + data[offset:], "insert", single, root)

    def push(self, target: SequenceValue, unit: Any, root: Any = None) -> None:
        """Append one unit."""
        target = _require_sequence(target)
        single = self._unit_payload(target, unit)
        self._commit(target, target.data + single, "push", single, root)

    # -- ranges ----------------------------------------------------------

    def extract(self, target: SequenceValue, spec: IndexSpec) -> SequenceValue:
        """Return a copy of a range as a new value of the same kind."""
        target = _require_sequence(target)
        r = resolve_range(len(target), spec)
        return target.wrap(target.payload(r.offset, r.count))

    def crop(self, target: SequenceValue, spec: IndexSpec) -> None:
        """Keep only a range, in place."""
        target = _require_sequence(target)
        r = resolve_range(len(target), spec)
        target.store(target.payload(r.offset, r.count))

    def drain(self, target: SequenceValue, spec: IndexSpec) -> SequenceValue:
        """Remove a range and return it."""
        target = _require_sequence(target)
        r = resolve_range(len(target), spec)
        removed = target.wrap(target.payload(r.offset, r.count))
        target.replace(r.offset, r.count, target.empty_payload())
        return removed

    def splice(self, target: SequenceValue, spec: IndexSpec, replacement: Any, root: Any = None) -> None:
        """Replace a range with ``replacement``; lengths need not match."""
        target = _require_sequence(target)
        r = resolve_range(len(target), spec)
        inserted = target.coerce_payload(replacement)
        data = target.data
        self._commit(target, data[:r.offset] + inserted + data[r.end:], "splice", inserted, root)

    def split(self, target: SequenceValue, pos: int) -> SequenceValue:
        """Remove and return everything from ``pos`` to the end."""
        target = _require_sequence(target)
        return self.drain(target, CountRange(pos, len(target)))

    # -- length changes --------------------------------------------------

    def truncate(self, target: SequenceValue, target_len: int) -> None:
        """Drop trailing units so the length is at most ``target_len``."""
        target = _require_sequence(target)
        if target_len <= 0:
            target.store(target.empty_payload())
        elif target_len < len(target):
            target.store(target.payload(0, target_len))

    def chop(self, target: SequenceValue, keep: int) -> None:
        """Drop leading units so only the last ``keep`` remain."""
        target = _require_sequence(target)
        if keep <= 0:
            target.store(target.empty_payload())
        elif keep < len(target):
            target.store(target.payload(len(target) - keep, keep))

    def pad(self, target: SequenceValue, target_len: int, filler: Any, root: Any = None) -> None:
        """Append copies of ``filler`` until the length reaches ``target_len``."""
        target = _require_sequence(target)
        missing = target_len - len(target)
        if missing <= 0:
            return
        if target.kind is SequenceKind.TEXT:
            piece = target.coerce_payload(filler)
            if not piece:
                raise ValueError("pad() filler string must not be empty")
            # Every character is at least one byte.
            self.size_guard.check_growth(target.kind, target.shallow_size + missing, "pad")
            repeats = -(-missing // len(piece))
            extra = (piece * repeats)[:missing]
            self._commit(target, target.data + extra, "pad", root=root)
            return

        self.size_guard.check_growth(target.kind, target_len, "pad")
        if target.kind is SequenceKind.BLOB:
            extra = bytearray([target.coerce_unit(filler)]) * missing
            self._commit(target, target.data + extra, "pad", root=root)
            return
        if isinstance(filler, SequenceValue):
            extra = [filler.wrap(filler.payload(0, len(filler))) for _ in range(missing)]
        else:
            extra = [filler] * missing
        self._commit(target, target.data + extra, "pad", extra, root)

    def append(self, target: SequenceValue, other: Any, root: Any = None) -> None:
        """Concatenate another value of the same kind (or a raw payload) onto ``target``."""
        target = _require_sequence(target)
        inserted = target.coerce_payload(other)
        self._commit(target, target.data + inserted, "append", inserted, root)

    def pop(self, target: SequenceValue, count: int | None = None) -> Any:
        """Remove from the end.

        Without ``count``, return the last unit (``None`` when empty). With
        ``count``, return the removed suffix as a value of the same kind.
        """
        target = _require_sequence(target)
        length = len(target)
        if count is None:
            if length == 0:
                return None
            unit = target.unit_at(length - 1)
            target.store(target.payload(0, length - 1))
            return unit
        if count <= 0:
            return target.wrap(target.empty_payload())
        count = min(count, length)
        removed = target.wrap(target.payload(length - count, count))
        target.store(target.payload(0, length - count))
        return removed

    def shift(self, target: SequenceValue) -> Any:
        """Remove and return the first unit, or ``None`` when empty."""
        return self.remove(target, 0)

    def reverse(self, target: SequenceValue) -> None:
        target = _require_sequence(target)
        target.store(target.data[::-1])

    # -- searching -------------------------------------------------------

    def contains(self, target: SequenceValue, unit: Any) -> bool:
        target = _require_sequence(target)
        if isinstance(unit, TextValue):
            unit = unit.data
        try:
            return unit in target.data
        except (TypeError, ValueError):
            return False

    def index_of(self, target: SequenceValue, unit: Any, start: int = 0) -> int:
        """Return the position of the first match at or after ``start``, else ``-1``.

        A negative ``start`` counts from the end; a start that does not
        resolve finds nothing.
        """
        target = _require_sequence(target)
        offset = resolve_position(len(target), start)
        if offset is None:
            return -1
        if target.kind is SequenceKind.ARRAY:
            for i in range(offset, len(target)):
                if target.data[i] == unit:
                    return i
            return -1
        if isinstance(unit, TextValue):
            unit = unit.data
        try:
            return target.data.find(unit, offset)
        except (TypeError, ValueError):
            return -1
