"""Reading and writing integers inside blobs.

Ranges are clamped to the blob like every other range operation, and at most
one integer's worth of bytes (4 or 8, by configured width) is read or written.
"""

from __future__ import annotations

from typing import Literal

from script_values.errors import ArithOverflow
from script_values.indexing import IndexSpec, resolve_range
from script_values.types import BlobValue, IntegerWidth

ByteOrder = Literal["little", "big"]


def _parse_int(blob: BlobValue, spec: IndexSpec, order: ByteOrder, width: IntegerWidth) -> int:
    r = resolve_range(len(blob), spec)
    count = min(r.count, width.size_bytes)
    if count == 0:
        return 0
    # The bytes read fill the buffer from its start; the rest stays zero.
    buf = bytes(blob.data[r.offset:r.offset + count]).ljust(width.size_bytes, b"\x00")
    return int.from_bytes(buf, order, signed=True)


def _write_int(blob: BlobValue, spec: IndexSpec, value: int, order: ByteOrder, width: IntegerWidth) -> None:
    r = resolve_range(len(blob), spec)
    count = min(r.count, width.size_bytes)
    if count == 0:
        return
    try:
        buf = value.to_bytes(width.size_bytes, order, signed=True)
    except OverflowError as e:
        raise ArithOverflow(f"{value} does not fit in i{width.bits}") from e
    blob.data[r.offset:r.offset + count] = buf[:count]


def parse_le_int(blob: BlobValue, spec: IndexSpec, width: IntegerWidth = IntegerWidth.BITS_64) -> int:
    """Read a little-endian signed integer from a range of the blob."""
    return _parse_int(blob, spec, "little", width)


def parse_be_int(blob: BlobValue, spec: IndexSpec, width: IntegerWidth = IntegerWidth.BITS_64) -> int:
    """Read a big-endian signed integer; the bytes read are the most significant ones."""
    return _parse_int(blob, spec, "big", width)


def write_le_int(blob: BlobValue, spec: IndexSpec, value: int, width: IntegerWidth = IntegerWidth.BITS_64) -> None:
    """Write the low-order bytes of ``value`` into a range of the blob."""
    _write_int(blob, spec, value, "little", width)


def write_be_int(blob: BlobValue, spec: IndexSpec, value: int, width: IntegerWidth = IntegerWidth.BITS_64) -> None:
    """Write the high-order bytes of ``value`` into a range of the blob."""
    _write_int(blob, spec, value, "big", width)
