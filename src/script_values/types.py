"""Value kinds for the script_values library."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class IntegerWidth(Enum):
    """Build-configured width of the engine's integer type."""

    BITS_32 = 32
    BITS_64 = 64

    @property
    def bits(self) -> int:
        return self.value

    @property
    def size_bytes(self) -> int:
        """Return the size in bytes of one integer at this width."""
        return self.value // 8

    @classmethod
    def from_bits(cls, bits: int) -> IntegerWidth:
        for width in cls:
            if width.value == bits:
                return width
        raise ValueError(f"Unsupported integer width: {bits} (expected 32 or 64)")


def type_range(width: IntegerWidth) -> tuple[int, int]:
    """Return (min, max) for a signed integer of the given width."""
    bits = width.bits
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


class SequenceKind(Enum):
    """The three sequence-like value kinds sharing one indexing contract."""

    ARRAY = "array"
    TEXT = "string"
    BLOB = "blob"

    @property
    def unit(self) -> str:
        """Return the addressing unit for this kind."""
        units = {
            SequenceKind.ARRAY: "element",
            SequenceKind.TEXT: "character",
            SequenceKind.BLOB: "byte",
        }
        return units[self]


class SequenceValue:
    """Base class for sequence values.

    Subclasses keep their units in ``data``: a ``list`` for arrays, a ``str``
    for text and a ``bytearray`` for blobs. All positions are unit positions.
    """

    kind: SequenceKind
    data: Any

    def __len__(self) -> int:
        return len(self.data)

    @property
    def shallow_size(self) -> int:
        """Return the size counted against this kind's ceiling."""
        return len(self.data)

    def unit_at(self, offset: int) -> Any:
        return self.data[offset]

    def payload(self, offset: int, count: int) -> Any:
        """Return a copy of ``count`` units starting at ``offset``."""
        return self.data[offset:offset + count]

    def replace(self, offset: int, count: int, payload: Any) -> None:
        """Replace ``count`` units at ``offset`` with ``payload`` in place."""
        self.data[offset:offset + count] = payload

    def store(self, payload: Any) -> None:
        """Replace all units."""
        self.data[:] = payload

    def coerce_unit(self, unit: Any) -> Any:
        """Return ``unit`` converted to the form stored in ``data``."""
        return unit

    def coerce_payload(self, value: Any) -> Any:
        """Convert a same-kind value, raw payload or single unit to a payload."""
        raise NotImplementedError

    def empty_payload(self) -> Any:
        raise NotImplementedError

    def wrap(self, payload: Any) -> SequenceValue:
        """Return a new value of the same kind holding ``payload``."""
        return type(self)(payload)

    def payload_size(self, payload: Any) -> int:
        """Return the shallow size a payload would have."""
        return len(payload)


@dataclass(eq=False)
class ArrayValue(SequenceValue):
    """A growable sequence of arbitrary elements.

    Elements are held by reference, so one array may alias another (or
    itself) as an element.
    """

    data: list[Any] = field(default_factory=list)

    kind = SequenceKind.ARRAY

    def __post_init__(self) -> None:
        self.data = list(self.data)

    def coerce_payload(self, value: Any) -> list[Any]:
        if isinstance(value, ArrayValue):
            return list(value.data)
        if isinstance(value, list):
            return list(value)
        return [value]

    def empty_payload(self) -> list[Any]:
        return []

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ArrayValue):
            return self is other or self.data == other.data
        if isinstance(other, list):
            return self.data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if any(item is self for item in self.data):
            return "ArrayValue([...])"
        return f"ArrayValue({self.data!r})"


@dataclass(eq=False)
class TextValue(SequenceValue):
    """UTF-8 text addressed by character (Unicode code point)."""

    data: str = ""

    kind = SequenceKind.TEXT

    @property
    def shallow_size(self) -> int:
        """Text ceilings are measured in UTF-8 bytes, not characters."""
        return len(self.data.encode("utf-8"))

    def payload_size(self, payload: str) -> int:
        return len(payload.encode("utf-8"))

    def replace(self, offset: int, count: int, payload: str) -> None:
        self.data = self.data[:offset] + payload + self.data[offset + count:]

    def store(self, payload: str) -> None:
        self.data = payload

    def coerce_unit(self, unit: Any) -> str:
        if not isinstance(unit, str) or len(unit) != 1:
            raise TypeError(f"String units must be single characters, got {unit!r}")
        return unit

    def coerce_payload(self, value: Any) -> str:
        if isinstance(value, TextValue):
            return value.data
        if isinstance(value, str):
            return value
        raise TypeError(f"Cannot use {type(value).__name__} as string content")

    def empty_payload(self) -> str:
        return ""

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TextValue):
            return self.data == other.data
        if isinstance(other, str):
            return self.data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self.data


@dataclass(eq=False)
class BlobValue(SequenceValue):
    """A raw byte buffer addressed by byte."""

    data: bytearray = field(default_factory=bytearray)

    kind = SequenceKind.BLOB

    def __post_init__(self) -> None:
        self.data = bytearray(self.data)

    def coerce_unit(self, unit: Any) -> int:
        # Only the low 8 bits of an integer are stored.
        if not isinstance(unit, int) or isinstance(unit, bool):
            raise TypeError(f"Blob units must be integers, got {type(unit).__name__}")
        return unit & 0xFF

    def coerce_payload(self, value: Any) -> bytearray:
        if isinstance(value, BlobValue):
            return bytearray(value.data)
        if isinstance(value, (bytes, bytearray)):
            return bytearray(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return bytearray([value & 0xFF])
        if isinstance(value, list):
            return bytearray(self.coerce_unit(v) for v in value)
        raise TypeError(f"Cannot use {type(value).__name__} as blob content")

    def empty_payload(self) -> bytearray:
        return bytearray()

    def __eq__(self, other: object) -> bool:
        if isinstance(other, BlobValue):
            return self.data == other.data
        if isinstance(other, (bytes, bytearray)):
            return self.data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]


def is_integer(value: Any) -> bool:
    """Check if a value is a bit-field capable integer (bools excluded)."""
    return isinstance(value, int) and not isinstance(value, bool)


def to_value(value: Any) -> Any:
    """Wrap raw Python containers in the matching sequence value kind."""
    if isinstance(value, SequenceValue):
        return value
    if isinstance(value, str):
        return TextValue(value)
    if isinstance(value, (bytes, bytearray)):
        return BlobValue(bytearray(value))
    if isinstance(value, list):
        return ArrayValue(value)
    return value
