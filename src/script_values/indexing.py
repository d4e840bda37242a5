"""Position and range resolution shared by every sequence kind and bit-fields.

Two conventions apply:

* A single position may be negative, counting back from the end: ``-1`` is
  the last unit and ``-len`` the first. Anything else out of bounds resolves
  to ``None``; callers decide whether that is an absent value or a no-op.
* A range describes an absolute extent. Its endpoints are never read from
  the end; they are clamped into ``[0, len]`` so range resolution is total.

A count-based range ``CountRange(start, count)`` is the exception: its start
is a position and follows the single-position convention, clamping to the
front when it reaches past the beginning.
"""

from __future__ import annotations

import math
import sys
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Union

from script_values.errors import IndexInvalidNoOp, InvalidRangeStep


@dataclass(frozen=True)
class IndexRange:
    """A ``start..end`` or ``start..=end`` range."""

    start: int
    end: int
    inclusive: bool = False

    def __str__(self) -> str:
        return f"{self.start}..{'=' if self.inclusive else ''}{self.end}"


@dataclass(frozen=True)
class CountRange:
    """A range given as a start position plus a number of units."""

    start: int
    count: int


@dataclass(frozen=True)
class ResolvedRange:
    """A validated ``(offset, count)`` pair within a container's bounds."""

    offset: int
    count: int

    @property
    def end(self) -> int:
        return self.offset + self.count

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def as_slice(self) -> slice:
        return slice(self.offset, self.offset + self.count)


IndexSpec = Union[int, IndexRange, CountRange, range]


def resolve_position(length: int, pos: int) -> int | None:
    """Resolve a signed single position against ``length``.

    Returns the offset, or ``None`` when the position does not exist.
    """
    if pos < 0:
        if -pos <= length:
            return length + pos
        return None
    if pos < length:
        return pos
    return None


def require_position(length: int, pos: int) -> int:
    """Resolve a position that must exist, raising ``IndexInvalidNoOp`` otherwise."""
    offset = resolve_position(length, pos)
    if offset is None:
        raise IndexInvalidNoOp(length, pos)
    return offset


def resolve_insert_position(length: int, pos: int) -> int:
    """Resolve an insertion point: past the end appends, before the front prepends."""
    if pos < 0:
        return max(length + pos, 0)
    return min(pos, length)


def _resolve_count_range(length: int, start: int, count: int) -> ResolvedRange:
    if start < 0:
        offset = max(length + start, 0)
    elif start >= length:
        return ResolvedRange(length, 0)
    else:
        offset = start
    if count <= 0:
        return ResolvedRange(offset, 0)
    return ResolvedRange(offset, min(count, length - offset))


def _resolve_index_range(length: int, start: int, end: int, inclusive: bool) -> ResolvedRange:
    if inclusive:
        end += 1
    start = max(start, 0)
    if start >= length:
        return ResolvedRange(length, 0)
    end = min(end, length)
    if end <= start:
        return ResolvedRange(start, 0)
    return ResolvedRange(start, end - start)


def normalize_spec(spec: IndexSpec) -> IndexRange | CountRange:
    """Convert any accepted range argument to ``IndexRange`` or ``CountRange``.

    A bare integer is a start position and the range runs to the end. A
    Python ``range`` must have step 1.
    """
    if isinstance(spec, (IndexRange, CountRange)):
        return spec
    if isinstance(spec, range):
        if spec.step != 1:
            raise InvalidRangeStep(f"Range step must be 1 for slicing, got {spec.step}")
        return IndexRange(spec.start, spec.stop)
    if isinstance(spec, int) and not isinstance(spec, bool):
        return CountRange(spec, sys.maxsize)
    raise TypeError(f"Invalid index range: {spec!r}")


def resolve_range(length: int, spec: IndexSpec) -> ResolvedRange:
    """Resolve a range argument against ``length``. Never raises on bounds."""
    spec = normalize_spec(spec)
    if isinstance(spec, CountRange):
        return _resolve_count_range(length, spec.start, spec.count)
    return _resolve_index_range(length, spec.start, spec.end, spec.inclusive)


def stepped_range(
    start: int | float,
    end: int | float,
    step: int | float,
    inclusive: bool = False,
) -> Iterator[int | float]:
    """Yield ``start``, ``start + step``, ... up to ``end``.

    The step must be non-zero, finite and point from ``start`` toward ``end``.
    A zero step is rejected even in unchecked mode since the iteration would
    never finish.
    """
    if step == 0:
        raise InvalidRangeStep("Step value cannot be zero")
    if isinstance(step, float) and not math.isfinite(step):
        raise InvalidRangeStep(f"Step value must be finite, got {step!r}")
    if (end > start and step < 0) or (end < start and step > 0):
        raise InvalidRangeStep(
            f"Step {step!r} does not lead from {start!r} to {end!r}")
    return _iterate_steps(start, end, step, inclusive)


def _iterate_steps(start, end, step, inclusive) -> Iterator[int | float]:
    if isinstance(start, float) or isinstance(step, float) or isinstance(end, float):
        def within(x: float) -> bool:
            if inclusive and x == end:
                return True
            return x < end if step > 0 else x > end

        # Multiply rather than accumulate so float error does not build up.
        i = 0
        current = start
        while within(current):
            yield current
            i += 1
            current = start + i * step
        return
    stop = end + (1 if step > 0 else -1) if inclusive else end
    yield from range(start, stop, step)
