"""Bit-field access to fixed-width integers.

Bits are addressed from 0 (least significant) upward. A negative position
counts from the most significant bit, so ``-1`` is bit ``width - 1`` and
``-width`` is bit 0.
"""

from __future__ import annotations

from collections.abc import Iterator

from script_values.errors import ArithOverflow
from script_values.indexing import (
    CountRange,
    IndexSpec,
    ResolvedRange,
    normalize_spec,
    resolve_position,
    resolve_range,
)
from script_values.types import IntegerWidth, is_integer, type_range


class BitFieldAccessor:
    """Reads and writes bits of integers at a configured width."""

    def __init__(self, width: IntegerWidth = IntegerWidth.BITS_64) -> None:
        self.width = width
        self.bits = width.bits
        self.mask = (1 << self.bits) - 1
        self.min_int, self.max_int = type_range(width)

    def _unsigned(self, value: int) -> int:
        if not is_integer(value):
            raise TypeError(f"Bit-field access requires an integer, got {type(value).__name__}")
        if not self.min_int <= value <= self.max_int:
            raise ArithOverflow(f"{value} does not fit in i{self.bits}")
        return value & self.mask

    def _signed(self, unsigned: int) -> int:
        if unsigned > self.max_int:
            return unsigned - (1 << self.bits)
        return unsigned

    def resolve(self, spec: IndexSpec | None) -> ResolvedRange | None:
        """Resolve a bit range. ``None`` means the start position is outside the width.

        An integer spec means "from this position up to the most significant bit".
        """
        if spec is None:
            return ResolvedRange(0, self.bits)
        if is_integer(spec):
            offset = resolve_position(self.bits, spec)
            if offset is None:
                return None
            return ResolvedRange(offset, self.bits - offset)
        spec = normalize_spec(spec)
        if isinstance(spec, CountRange):
            offset = resolve_position(self.bits, spec.start)
            if offset is None:
                return None
            count = max(0, min(spec.count, self.bits - offset))
            return ResolvedRange(offset, count)
        return resolve_range(self.bits, spec)

    def get_bit(self, value: int, pos: int) -> bool | None:
        unsigned = self._unsigned(value)
        offset = resolve_position(self.bits, pos)
        if offset is None:
            return None
        return bool((unsigned >> offset) & 1)

    def set_bit(self, value: int, pos: int, on: bool) -> int:
        unsigned = self._unsigned(value)
        offset = resolve_position(self.bits, pos)
        if offset is None:
            return value
        if on:
            unsigned |= 1 << offset
        else:
            unsigned &= ~(1 << offset)
        return self._signed(unsigned & self.mask)

    def get_bits(self, value: int, spec: IndexSpec) -> int:
        """Extract a bit range, shifted down so the range start becomes bit 0."""
        unsigned = self._unsigned(value)
        r = self.resolve(spec)
        if r is None or r.is_empty:
            return 0
        if r.count == self.bits:
            return value
        return (unsigned >> r.offset) & ((1 << r.count) - 1)

    def set_bits(self, value: int, spec: IndexSpec, new_bits: int) -> int:
        """Write the low bits of ``new_bits`` into a bit range."""
        unsigned = self._unsigned(value)
        if not is_integer(new_bits):
            raise TypeError(f"New bits must be an integer, got {type(new_bits).__name__}")
        r = self.resolve(spec)
        if r is None or r.is_empty:
            return value
        field_mask = (1 << r.count) - 1
        unsigned &= ~(field_mask << r.offset)
        unsigned |= (new_bits & field_mask) << r.offset
        return self._signed(unsigned & self.mask)

    def iter_bits(self, value: int, spec: IndexSpec | None = None) -> Iterator[bool]:
        """Yield the bits of a range, least significant first."""
        unsigned = self._unsigned(value)
        r = self.resolve(spec)
        if r is None:
            return
        for offset in range(r.offset, r.end):
            yield bool((unsigned >> offset) & 1)

    def count_ones(self, value: int) -> int:
        return bin(self._unsigned(value)).count("1")

    def count_zeros(self, value: int) -> int:
        return self.bits - self.count_ones(value)

