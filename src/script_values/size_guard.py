"""Shallow and aggregate size enforcement.

Arrays hold their elements by reference, so a value can be shared by several
parents or even contain itself. The aggregate size is therefore recomputed
from the live structure on every check; nothing is cached between checks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from script_values.config import SizeLimits
from script_values.errors import SizeLimitExceeded
from script_values.types import SequenceKind, SequenceValue

logger = logging.getLogger(__name__)


@dataclass
class DataSizes:
    """Aggregate sizes per kind: array elements, string bytes and blob bytes."""

    arrays: int = 0
    strings: int = 0
    blobs: int = 0

    @property
    def total(self) -> int:
        return self.arrays + self.strings + self.blobs

    def add(self, other: DataSizes) -> None:
        self.arrays += other.arrays
        self.strings += other.strings
        self.blobs += other.blobs

    def for_kind(self, kind: SequenceKind) -> int:
        if kind is SequenceKind.ARRAY:
            return self.arrays
        if kind is SequenceKind.TEXT:
            return self.strings
        return self.blobs


def _leaf_sizes(kind: SequenceKind, size: int) -> DataSizes:
    if kind is SequenceKind.TEXT:
        return DataSizes(strings=size)
    return DataSizes(blobs=size)


class SizeGuard:
    """Checks prospective sizes against the configured ceilings."""

    def __init__(self, limits: SizeLimits | None = None, unchecked: bool = False) -> None:
        self.limits = limits or SizeLimits()
        self.unchecked = unchecked

    @property
    def active(self) -> bool:
        return not self.unchecked and not self.limits.unlimited

    def _reject(self, kind: SequenceKind, size: int | None, operation: str | None) -> SizeLimitExceeded:
        error = SizeLimitExceeded(kind, self.limits.limit_for(kind), size, operation)
        logger.debug("Size guard rejected %s: %s", operation or "operation", error)
        return error

    def check_growth(self, kind: SequenceKind, prospective_len: int, operation: str | None = None) -> None:
        """Shallow check of a prospective unit count (bytes for strings)."""
        if self.unchecked:
            return
        limit = self.limits.limit_for(kind)
        if limit and prospective_len > limit:
            raise self._reject(kind, prospective_len, operation)

    def check_sizes(self, sizes: DataSizes, operation: str | None = None) -> None:
        if self.unchecked:
            return
        for kind in SequenceKind:
            limit = self.limits.limit_for(kind)
            total = sizes.for_kind(kind)
            if limit and total > limit:
                raise self._reject(kind, total, operation)

    def check_aggregate(
        self,
        root: Any,
        substitute: dict[int, Any] | None = None,
        operation: str | None = None,
    ) -> None:
        """Check the aggregate size of everything reachable from ``root``.

        ``substitute`` maps ``id(value)`` to a payload to measure in place of
        that value's current data, so a mutation can be validated before it
        is committed.
        """
        if not self.active:
            return
        sizes = self._measure(root, substitute or {}, check=True, operation=operation)
        self.check_sizes(sizes, operation)

    def data_sizes(self, root: Any, substitute: dict[int, Any] | None = None) -> DataSizes:
        """Return aggregate sizes without enforcing anything. Cycles are counted once."""
        return self._measure(root, substitute or {}, check=False, operation=None)

    def check_payload(self, target: SequenceValue, payload: Any, operation: str) -> None:
        """Validate replacing ``target``'s units with ``payload`` before committing."""
        if self.unchecked:
            return
        self.check_growth(target.kind, target.payload_size(payload), operation)
        if target.kind is SequenceKind.ARRAY and self.active:
            self.check_aggregate(target, {id(target): payload}, operation)

    def _check_unbounded(self, sizes: DataSizes, operation: str | None) -> None:
        """Reject every limited kind present in a cyclic subtree."""
        for kind in SequenceKind:
            if self.limits.limit_for(kind) and sizes.for_kind(kind):
                raise self._reject(kind, None, operation)

    def _measure(
        self,
        root: Any,
        substitute: dict[int, Any],
        check: bool,
        operation: str | None,
    ) -> DataSizes:
        if not isinstance(root, SequenceValue):
            return DataSizes()
        if root.kind is not SequenceKind.ARRAY:
            payload = substitute.get(id(root), root.data)
            return _leaf_sizes(root.kind, root.payload_size(payload))

        memo: dict[int, DataSizes] = {}
        on_path: set[int] = set()
        # Arrays that are their own descendants; everything below them repeats forever.
        cyclic: set[int] = set()
        # Each frame: (array, element iterator, sizes accumulated so far)
        frames: list[tuple[SequenceValue, Any, DataSizes]] = []

        def enter(array: SequenceValue) -> None:
            elements = substitute.get(id(array), array.data)
            on_path.add(id(array))
            frames.append((array, iter(elements), DataSizes(arrays=len(elements))))

        enter(root)
        while frames:
            array, elements, acc = frames[-1]
            descended = False
            for item in elements:
                if not isinstance(item, SequenceValue):
                    continue
                key = id(item)
                if key in on_path:
                    cyclic.add(key)
                    continue
                cached = memo.get(key)
                if cached is not None:
                    acc.add(cached)
                    continue
                if item.kind is SequenceKind.ARRAY:
                    enter(item)
                    descended = True
                    break
                payload = substitute.get(key, item.data)
                leaf = _leaf_sizes(item.kind, item.payload_size(payload))
                memo[key] = leaf
                acc.add(leaf)
            if descended:
                continue

            frames.pop()
            on_path.discard(id(array))
            memo[id(array)] = acc
            if check:
                if id(array) in cyclic:
                    self._check_unbounded(acc, operation)
                self.check_sizes(acc, operation)
            if frames:
                frames[-1][2].add(acc)

        return memo[id(root)]
