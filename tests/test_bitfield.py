"""Tests for bit-field access to integers."""

import pytest

from script_values.bitfield import BitFieldAccessor
from script_values.errors import ArithOverflow
from script_values.indexing import CountRange, IndexRange
from script_values.types import IntegerWidth, type_range

I64_MIN, I64_MAX = type_range(IntegerWidth.BITS_64)


@pytest.fixture
def bits():
    return BitFieldAccessor()


@pytest.fixture
def bits32():
    return BitFieldAccessor(IntegerWidth.BITS_32)


class TestSingleBits:
    def test_get_bit(self, bits):
        assert bits.get_bit(0b101, 0) is True
        assert bits.get_bit(0b101, 1) is False
        assert bits.get_bit(0b101, 2) is True

    def test_negative_position_counts_from_msb(self, bits):
        assert bits.get_bit(-1, -1) is True
        assert bits.get_bit(1, -64) is True
        assert bits.get_bit(1, -63) is False

    def test_out_of_width(self, bits):
        assert bits.get_bit(5, 64) is None
        assert bits.get_bit(5, -65) is None

    def test_set_bit(self, bits):
        assert bits.set_bit(0, 3, True) == 8
        assert bits.set_bit(15, 0, False) == 14

    def test_set_msb_gives_negative(self, bits):
        assert bits.set_bit(0, 63, True) == I64_MIN

    def test_set_bit_out_of_width_unchanged(self, bits):
        assert bits.set_bit(7, 64, True) == 7

    def test_32_bit_width(self, bits32):
        assert bits32.get_bit(-1, 31) is True
        assert bits32.get_bit(-1, 32) is None


class TestBitRanges:
    def test_get_bits_inclusive(self, bits):
        assert bits.get_bits(0xABCD, IndexRange(4, 11, inclusive=True)) == 0xBC

    def test_get_bits_exclusive(self, bits):
        assert bits.get_bits(0xABCD, IndexRange(4, 12)) == 0xBC

    def test_get_bits_count_range(self, bits):
        assert bits.get_bits(0xABCD, CountRange(8, 4)) == 0xB

    def test_get_bits_negative_start(self, bits):
        assert bits.get_bits(I64_MIN, CountRange(-1, 1)) == 1

    def test_int_spec_runs_to_msb(self, bits):
        assert bits.get_bits(0xF0, 4) == 0xF
        assert bits.get_bits(-1, -8) == 0xFF

    def test_full_width_returns_signed_value(self, bits):
        assert bits.get_bits(-5, IndexRange(0, 64)) == -5
        assert bits.get_bits(-5, 0) == -5

    def test_narrow_extraction_non_negative(self, bits):
        assert bits.get_bits(-1, IndexRange(0, 8)) == 0xFF

    def test_unresolvable_start(self, bits):
        assert bits.get_bits(-1, 64) == 0
        assert bits.get_bits(-1, CountRange(70, 3)) == 0

    def test_empty_range(self, bits):
        assert bits.get_bits(-1, IndexRange(5, 5)) == 0

    def test_set_bits(self, bits):
        assert bits.set_bits(0, CountRange(4, 4), 0xFF) == 0xF0

    def test_set_bits_clears_field(self, bits):
        assert bits.set_bits(0xFFFF, IndexRange(4, 8), 0) == 0xFF0F

    def test_set_bits_reinterprets_sign(self, bits32):
        assert bits32.set_bits(0, IndexRange(24, 32), 0xFF) == -(1 << 24)

    def test_set_bits_unresolvable_unchanged(self, bits):
        assert bits.set_bits(42, 64, 1) == 42

    def test_round_trip(self, bits):
        """get_bits(set_bits(v, r, b), r) == b masked to the range width."""
        value = 0x0123_4567_89AB_CDEF
        for spec, count in (
            (IndexRange(0, 8), 8),
            (IndexRange(4, 11, inclusive=True), 8),
            (CountRange(20, 13), 13),
            (CountRange(-10, 10), 10),
        ):
            for new_bits in (0, 1, 0x5A5A, -1):
                updated = bits.set_bits(value, spec, new_bits)
                assert bits.get_bits(updated, spec) == new_bits & ((1 << count) - 1)


class TestBitIteration:
    def test_iter_bits(self, bits):
        assert list(bits.iter_bits(5, CountRange(0, 3))) == [True, False, True]

    def test_iter_all_bits(self, bits32):
        assert len(list(bits32.iter_bits(0))) == 32

    def test_count_ones_and_zeros(self, bits, bits32):
        assert bits32.count_ones(-1) == 32
        assert bits.count_ones(0b1011) == 3
        assert bits.count_zeros(1) == 63


class TestValidation:
    def test_value_outside_width(self, bits32):
        with pytest.raises(ArithOverflow, match="does not fit"):
            bits32.get_bit(1 << 40, 0)

    def test_non_integer(self, bits):
        with pytest.raises(TypeError):
            bits.get_bit(1.5, 0)
