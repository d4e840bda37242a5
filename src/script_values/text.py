"""Text-specific helpers. Positions and lengths are in characters."""

from __future__ import annotations

from script_values.indexing import IndexSpec, resolve_position, resolve_range
from script_values.types import TextValue


def _text(value: TextValue | str) -> str:
    if isinstance(value, TextValue):
        return value.data
    if isinstance(value, str):
        return value
    raise TypeError(f"Expected a string, got {type(value).__name__}")


def trim(text: TextValue) -> None:
    """Strip leading and trailing whitespace in place."""
    text.store(text.data.strip())


def to_upper(text: TextValue | str) -> TextValue:
    return TextValue(_text(text).upper())


def to_lower(text: TextValue | str) -> TextValue:
    return TextValue(_text(text).lower())


def byte_len(text: TextValue | str) -> int:
    """Return the UTF-8 length in bytes."""
    return len(_text(text).encode("utf-8"))


def index_of(text: TextValue | str, needle: TextValue | str, start: int = 0) -> int:
    """Return the character position of ``needle`` at or after ``start``, else ``-1``.

    A negative ``start`` counts back from the end of the text.
    """
    haystack = _text(text)
    offset = resolve_position(len(haystack), start)
    if offset is None:
        return -1
    return haystack.find(_text(needle), offset)


def sub_string(text: TextValue | str, spec: IndexSpec) -> TextValue:
    """Return a range of characters as a new string.

    ``spec`` is a range, or a ``CountRange(start, count)`` whose start may be
    negative.
    """
    haystack = _text(text)
    r = resolve_range(len(haystack), spec)
    return TextValue(haystack[r.offset:r.end])
