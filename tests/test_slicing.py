"""Tests for sequence get/set/slice/splice operations."""

import pytest

from script_values.config import SizeLimits
from script_values.errors import SizeLimitExceeded
from script_values.indexing import CountRange, IndexRange
from script_values.size_guard import SizeGuard
from script_values.slicing import SliceEngine
from script_values.types import ArrayValue, BlobValue, SequenceKind, TextValue


@pytest.fixture
def slices():
    return SliceEngine()


def limited(**limits):
    return SliceEngine(SizeGuard(SizeLimits(**limits)))


class TestSinglePositions:
    """Single-position access is silent when the position does not exist."""

    def test_get(self, slices):
        arr = ArrayValue([10, 20, 30])
        assert slices.get(arr, 0) == 10
        assert slices.get(arr, -1) == 30

    def test_get_out_of_bounds(self, slices):
        arr = ArrayValue([10, 20, 30])
        assert slices.get(arr, 3) is None
        assert slices.get(arr, -4) is None

    def test_get_text_and_blob(self, slices):
        assert slices.get(TextValue("héllo"), 1) == "é"
        assert slices.get(BlobValue(b"\x01\x02"), -1) == 2

    def test_set(self, slices):
        arr = ArrayValue([1, 2, 3])
        slices.set(arr, -1, 9)
        assert arr == [1, 2, 9]

    def test_set_out_of_bounds_is_noop(self, slices):
        arr = ArrayValue([1, 2, 3])
        slices.set(arr, 5, 9)
        assert arr == [1, 2, 3]

    def test_set_text(self, slices):
        text = TextValue("abc")
        slices.set(text, 1, "X")
        assert text == "aXc"

    def test_set_text_rejects_multiple_characters(self, slices):
        with pytest.raises(TypeError, match="single characters"):
            slices.set(TextValue("abc"), 1, "XY")

    def test_set_blob_masks_to_byte(self, slices):
        blob = BlobValue(b"\x00\x00")
        slices.set(blob, 0, 300)
        assert blob == b"\x2c\x00"

    def test_remove(self, slices):
        arr = ArrayValue([1, 2, 3])
        assert slices.remove(arr, 1) == 2
        assert arr == [1, 3]

    def test_remove_out_of_bounds(self, slices):
        arr = ArrayValue([1, 2, 3])
        assert slices.remove(arr, 7) is None
        assert arr == [1, 2, 3]

    def test_insert_front_and_past_end(self, slices):
        arr = ArrayValue([2, 3])
        slices.insert(arr, 0, 1)
        assert arr == [1, 2, 3]
        slices.insert(arr, 999, 4)
        assert arr == [1, 2, 3, 4]

    def test_insert_large_negative_prepends(self, slices):
        arr = ArrayValue([2, 3])
        slices.insert(arr, -999, 1)
        assert arr == [1, 2, 3]

    def test_insert_text(self, slices):
        text = TextValue("ac")
        slices.insert(text, 1, "b")
        assert text == "abc"

    def test_push(self, slices):
        blob = BlobValue()
        slices.push(blob, 7)
        assert blob == b"\x07"


class TestRanges:
    def test_extract(self, slices):
        arr = ArrayValue([0, 1, 2, 3, 4])
        part = slices.extract(arr, IndexRange(1, 3))
        assert isinstance(part, ArrayValue)
        assert part == [1, 2]
        assert arr == [0, 1, 2, 3, 4]

    def test_extract_text_kind(self, slices):
        part = slices.extract(TextValue("hello"), CountRange(-3, 2))
        assert isinstance(part, TextValue)
        assert part == "ll"

    def test_extract_clamps(self, slices):
        assert slices.extract(ArrayValue([1, 2]), IndexRange(1, 100)) == [2]
        assert slices.extract(ArrayValue([1, 2]), IndexRange(5, 9)) == []

    def test_crop(self, slices):
        text = TextValue("hello world")
        slices.crop(text, CountRange(6, 5))
        assert text == "world"

    def test_crop_idempotent(self, slices):
        for spec in (IndexRange(1, 4), CountRange(-3, 2), IndexRange(2, 2), 3):
            once = ArrayValue(list(range(8)))
            twice = ArrayValue(list(range(8)))
            slices.crop(once, spec)
            slices.crop(twice, spec)
            slices.crop(twice, IndexRange(0, len(twice)))
            assert once == twice

    def test_drain(self, slices):
        arr = ArrayValue([0, 1, 2, 3, 4])
        removed = slices.drain(arr, IndexRange(1, 3, inclusive=True))
        assert removed == [1, 2, 3]
        assert arr == [0, 4]

    def test_splice_grow_and_shrink(self, slices):
        text = TextValue("hello world")
        slices.splice(text, IndexRange(0, 5), "goodbye")
        assert text == "goodbye world"
        slices.splice(text, CountRange(7, 6), "")
        assert text == "goodbye"

    def test_splice_array_with_array(self, slices):
        arr = ArrayValue([1, 2, 3])
        slices.splice(arr, IndexRange(1, 2), ArrayValue(["a", "b"]))
        assert arr == [1, "a", "b", 3]

    def test_extract_splice_round_trip(self, slices):
        for spec in (IndexRange(1, 4), CountRange(-2, 5), IndexRange(9, 12), 0):
            for value in (
                ArrayValue([1, 2, 3, 4, 5]),
                TextValue("abcde"),
                BlobValue(b"\x01\x02\x03\x04\x05"),
            ):
                before = value.wrap(value.payload(0, len(value)))
                slices.splice(value, spec, slices.extract(value, spec))
                assert value == before

    def test_split(self, slices):
        blob = BlobValue(b"\x01\x02\x03\x04")
        tail = slices.split(blob, -1)
        assert tail == b"\x04"
        assert blob == b"\x01\x02\x03"


class TestLengthChanges:
    def test_truncate(self, slices):
        arr = ArrayValue([1, 2, 3])
        slices.truncate(arr, 2)
        assert arr == [1, 2]
        slices.truncate(arr, 10)
        assert arr == [1, 2]
        slices.truncate(arr, -1)
        assert arr == []

    def test_chop(self, slices):
        text = TextValue("abcdef")
        slices.chop(text, 2)
        assert text == "ef"

    def test_pad_blob(self, slices):
        blob = BlobValue(b"\x01")
        slices.pad(blob, 3, 0x1FF)
        assert blob == b"\x01\xff\xff"

    def test_pad_text_multi_character(self, slices):
        text = TextValue("ab")
        slices.pad(text, 5, "xy")
        assert text == "abxyx"

    def test_pad_shorter_target_is_noop(self, slices):
        text = TextValue("abc")
        slices.pad(text, 2, "x")
        assert text == "abc"

    def test_pad_array_copies_sequence_filler(self, slices):
        arr = ArrayValue()
        filler = ArrayValue([0])
        slices.pad(arr, 2, filler)
        assert arr == [[0], [0]]
        assert arr.data[0] is not arr.data[1]
        assert arr.data[0] is not filler

    def test_pop(self, slices):
        arr = ArrayValue([1, 2, 3])
        assert slices.pop(arr) == 3
        assert arr == [1, 2]

    def test_pop_empty(self, slices):
        assert slices.pop(ArrayValue()) is None

    def test_pop_count(self, slices):
        text = TextValue("hello")
        assert slices.pop(text, 2) == "lo"
        assert text == "hel"
        assert slices.pop(text, 0) == ""
        assert slices.pop(text, 10) == "hel"
        assert text == ""

    def test_append(self, slices):
        arr = ArrayValue([1])
        slices.append(arr, ArrayValue([2, 3]))
        slices.append(arr, 4)
        assert arr == [1, 2, 3, 4]

    def test_shift_and_reverse(self, slices):
        arr = ArrayValue([1, 2, 3])
        assert slices.shift(arr) == 1
        slices.reverse(arr)
        assert arr == [3, 2]


class TestSearching:
    def test_contains(self, slices):
        assert slices.contains(ArrayValue([1, 2]), 2)
        assert slices.contains(TextValue("hello"), TextValue("ell"))
        assert not slices.contains(BlobValue(b"\x01"), 300)

    def test_index_of(self, slices):
        arr = ArrayValue([1, 2, 1])
        assert slices.index_of(arr, 1) == 0
        assert slices.index_of(arr, 1, 1) == 2
        assert slices.index_of(arr, 1, -1) == 2
        assert slices.index_of(arr, 5) == -1
        assert slices.index_of(arr, 1, 10) == -1

    def test_index_of_blob(self, slices):
        assert slices.index_of(BlobValue(b"\x00\x07\x07"), 7) == 1


class TestGuardedGrowth:
    """Rejected growth leaves the value unchanged."""

    def test_push_past_limit(self):
        slices = limited(max_array_size=3)
        arr = ArrayValue([1, 2, 3])
        with pytest.raises(SizeLimitExceeded) as excinfo:
            slices.push(arr, 4)
        assert excinfo.value.kind is SequenceKind.ARRAY
        assert excinfo.value.size == 4
        assert excinfo.value.operation == "push"
        assert arr == [1, 2, 3]

    def test_insert_past_limit(self):
        slices = limited(max_array_size=2)
        arr = ArrayValue([1, 2])
        with pytest.raises(SizeLimitExceeded, match="in insert"):
            slices.insert(arr, 0, 0)
        assert arr == [1, 2]

    def test_text_limit_counts_bytes(self):
        slices = limited(max_string_size=4)
        text = TextValue("éé")
        with pytest.raises(SizeLimitExceeded, match="string size"):
            slices.pad(text, 3, "a")
        assert text == "éé"

    def test_blob_pad_checked_before_growth(self):
        slices = limited(max_blob_size=8)
        blob = BlobValue(b"\x00")
        with pytest.raises(SizeLimitExceeded, match="blob"):
            slices.pad(blob, 1_000_000, 0)
        assert len(blob) == 1

    def test_splice_grow_past_limit(self):
        slices = limited(max_string_size=5)
        text = TextValue("abc")
        with pytest.raises(SizeLimitExceeded):
            slices.splice(text, IndexRange(0, 1), "xyzw")
        assert text == "abc"

    def test_shrinking_is_unchecked(self):
        slices = limited(max_array_size=2)
        arr = ArrayValue([1, 2, 3, 4])
        slices.truncate(arr, 3)
        assert arr == [1, 2, 3]

    def test_nested_set_checks_aggregate(self):
        slices = limited(max_array_size=4)
        outer = ArrayValue([0, 0])
        inner = ArrayValue([1, 2, 3])
        with pytest.raises(SizeLimitExceeded):
            slices.set(outer, 0, inner)
        assert outer == [0, 0]

    def test_nested_growth_checked_against_root(self):
        slices = limited(max_array_size=4)
        inner = ArrayValue([1])
        outer = ArrayValue([inner, 0])
        slices.push(inner, 2, root=outer)
        with pytest.raises(SizeLimitExceeded, match="array size 5"):
            slices.append(inner, [3], root=outer)
        assert inner == [1, 2]

    def test_self_insertion_rejected(self):
        slices = limited(max_array_size=10)
        arr = ArrayValue([1])
        with pytest.raises(SizeLimitExceeded, match="cycle"):
            slices.push(arr, arr)
        assert arr == [1]
