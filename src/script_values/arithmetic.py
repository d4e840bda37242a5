"""Checked arithmetic over the engine's fixed-width integers and floats."""

from __future__ import annotations

import logging
import math

from script_values.errors import ArithError, ArithOverflow, DivideByZero, InvalidFloatOp
from script_values.types import IntegerWidth, is_integer, type_range

logger = logging.getLogger(__name__)

Number = int | float


class ArithmeticGuard:
    """Integer and float operations that never return a silently wrapped value.

    Integer operations are checked against the configured width and raise
    ``ArithOverflow``; division and remainder by zero raise ``DivideByZero``.
    Float operations raise ``InvalidFloatOp`` when finite inputs produce
    infinity or NaN.

    With ``unchecked=True`` integer results wrap modulo ``2**width`` (two's
    complement) and float results are returned as computed. Division by zero
    still raises because there is no result to return.
    """

    def __init__(self, width: IntegerWidth = IntegerWidth.BITS_64, unchecked: bool = False) -> None:
        self.width = width
        self.unchecked = unchecked
        self.min_int, self.max_int = type_range(width)

    # -- helpers ---------------------------------------------------------

    def wrap(self, value: int) -> int:
        """Truncate an integer to the configured width, two's complement."""
        bits = self.width.bits
        value &= (1 << bits) - 1
        if value > self.max_int:
            value -= 1 << bits
        return value

    def _fail(self, error: ArithError) -> ArithError:
        logger.debug("Arithmetic rejected: %s", error)
        return error

    def _int_result(self, value: int, op: str) -> int:
        if self.min_int <= value <= self.max_int:
            return value
        if self.unchecked:
            return self.wrap(value)
        raise self._fail(ArithOverflow(
            f"Overflow: {op} result {value} out of range for i{self.width.bits} "
            f"({self.min_int}..{self.max_int})"))

    def _float_result(self, value: float, a: Number, b: Number, op: str) -> float:
        if self.unchecked or math.isfinite(value):
            return value
        if not (math.isfinite(a) and math.isfinite(b)):
            return value  # non-finite in, non-finite out
        raise self._fail(InvalidFloatOp(f"Invalid float operation: {a!r} {op} {b!r} gives {value!r}"))

    @staticmethod
    def _operands(a: Number, b: Number, op: str) -> bool:
        """Validate operands. Returns True when the operation is on floats."""
        for x in (a, b):
            if isinstance(x, bool) or not isinstance(x, (int, float)):
                raise TypeError(f"Cannot apply '{op}' to non-numeric value {x!r}")
        return isinstance(a, float) or isinstance(b, float)

    def _as_floats(self, a: Number, b: Number, op: str) -> tuple[float, float]:
        try:
            return float(a), float(b)
        except OverflowError as e:
            raise self._fail(InvalidFloatOp(
                f"Invalid float operation: {op} operand too large for a float")) from e

    def _require_int(self, a: Number, b: Number, op: str) -> None:
        if not (is_integer(a) and is_integer(b)):
            raise TypeError(f"'{op}' requires integer operands, got {a!r} and {b!r}")

    # -- operations ------------------------------------------------------

    def checked_add(self, a: Number, b: Number) -> Number:
        if self._operands(a, b, "+"):
            x, y = self._as_floats(a, b, "+")
            return self._float_result(x + y, a, b, "+")
        return self._int_result(a + b, "+")

    def checked_sub(self, a: Number, b: Number) -> Number:
        if self._operands(a, b, "-"):
            x, y = self._as_floats(a, b, "-")
            return self._float_result(x - y, a, b, "-")
        return self._int_result(a - b, "-")

    def checked_mul(self, a: Number, b: Number) -> Number:
        if self._operands(a, b, "*"):
            x, y = self._as_floats(a, b, "*")
            return self._float_result(x * y, a, b, "*")
        return self._int_result(a * b, "*")

    def checked_div(self, a: Number, b: Number) -> Number:
        """Divide. Integer division truncates toward zero."""
        is_float = self._operands(a, b, "/")
        if b == 0:
            raise self._fail(DivideByZero(f"Division by zero: {a!r} / {b!r}"))
        if is_float:
            x, y = self._as_floats(a, b, "/")
            return self._float_result(x / y, a, b, "/")
        quotient = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            quotient = -quotient
        return self._int_result(quotient, "/")

    def checked_rem(self, a: Number, b: Number) -> Number:
        """Remainder with the sign of the dividend."""
        is_float = self._operands(a, b, "%")
        if b == 0:
            raise self._fail(DivideByZero(f"Division by zero: {a!r} % {b!r}"))
        if is_float:
            x, y = self._as_floats(a, b, "%")
            return self._float_result(math.fmod(x, y), a, b, "%")
        # MIN % -1 is mathematically 0 but overflows in the underlying division.
        if a == self.min_int and b == -1 and not self.unchecked:
            raise self._fail(ArithOverflow(f"Overflow: {a} % {b}"))
        remainder = abs(a) % abs(b)
        return -remainder if a < 0 else remainder

    def checked_pow(self, base: Number, exponent: Number) -> Number:
        if self._operands(base, exponent, "**"):
            x, y = self._as_floats(base, exponent, "**")
            try:
                result = math.pow(x, y)
            except OverflowError:
                result = math.inf
            except ValueError:
                result = math.nan
            return self._float_result(result, base, exponent, "**")
        if exponent < 0:
            raise self._fail(ArithError(f"Integer raised to a negative power: {base} ** {exponent}"))
        if self.unchecked:
            return self.wrap(pow(base, exponent, 1 << self.width.bits))
        if abs(base) >= 2 and exponent >= self.width.bits:
            raise self._fail(ArithOverflow(f"Overflow: {base} ** {exponent}"))
        return self._int_result(base ** exponent, "**")

    def checked_shl(self, a: int, b: int) -> int:
        """Shift left. A negative amount shifts right."""
        self._require_int(a, b, "<<")
        if b < 0:
            return self.checked_shr(a, -b)
        if b >= self.width.bits:
            if self.unchecked:
                return 0
            raise self._fail(ArithOverflow(f"Left-shift by too many bits: {b}"))
        return self._int_result(a << b, "<<")

    def checked_shr(self, a: int, b: int) -> int:
        """Arithmetic shift right. A negative amount shifts left."""
        self._require_int(a, b, ">>")
        if b < 0:
            return self.checked_shl(a, -b)
        if b >= self.width.bits:
            if self.unchecked:
                return -1 if a < 0 else 0
            raise self._fail(ArithOverflow(f"Right-shift by too many bits: {b}"))
        return a >> b

    def checked_neg(self, a: Number) -> Number:
        if isinstance(a, float):
            return -a
        self._require_int(a, 0, "neg")
        return self._int_result(-a, "neg")

    def checked_abs(self, a: Number) -> Number:
        if isinstance(a, float):
            return abs(a)
        self._require_int(a, 0, "abs")
        return self._int_result(abs(a), "abs")

    def checked_float_to_int(self, x: float) -> int:
        """Convert a float to an integer, truncating toward zero."""
        if not math.isfinite(x):
            raise self._fail(InvalidFloatOp(f"Cannot convert {x!r} to an integer"))
        return self._int_result(int(x), "to_int")
