"""
Named arithmetic and bit operations on sizes.

Every function returns a new size of the first argument's type. Plain names wrap around
on overflow (modular, two's complement for signed sizes), checked_* names raise
OverflowError, and overflowing_* names return the wrapped result with an overflow flag.
The second operand may be a size of the same signedness or a plain int.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import TypeVar

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value
from .size import SizeBase

S = TypeVar("S", bound=SizeBase)


# Wrapping arithmetic --------------------------------------------------------------------------------------------------

def add(a: S, b: S | int) -> S:
    """a + b, wrapping on overflow."""
    rhs = _rhs(a, b)
    return a._wrap(a.value + rhs)


def subtract(a: S, b: S | int) -> S:
    """a - b, wrapping on overflow."""
    rhs = _rhs(a, b)
    return a._wrap(a.value - rhs)


def multiply(a: S, b: S | int) -> S:
    """a * b, wrapping on overflow."""
    rhs = _rhs(a, b)
    return a._wrap(a.value * rhs)


def negate(a: S) -> S:
    """-a, wrapping on overflow (negating MIN_VALUE gives MIN_VALUE)."""
    return a._wrap(-a.value)


def increment(a: S) -> S:
    return a._wrap(a.value + 1)


def decrement(a: S) -> S:
    return a._wrap(a.value - 1)


# Checked arithmetic ---------------------------------------------------------------------------------------------------

def checked_add(a: S, b: S | int) -> S:
    """
    a + b, raising OverflowError if the result is out of range.

    Examples:
        >>> checked_add(BinarySize.MAX_VALUE, BinarySize.MAX_VALUE)
        Traceback (most recent call last):
            ...
        OverflowError: BinarySize arithmetic overflow: 18446744073709551614 is out of range
    """
    rhs = _rhs(a, b)
    return a._checked(a.value + rhs)


def checked_subtract(a: S, b: S | int) -> S:
    rhs = _rhs(a, b)
    return a._checked(a.value - rhs)


def checked_multiply(a: S, b: S | int) -> S:
    rhs = _rhs(a, b)
    return a._checked(a.value * rhs)


def checked_negate(a: S) -> S:
    return a._checked(-a.value)


def checked_increment(a: S) -> S:
    return a._checked(a.value + 1)


def checked_decrement(a: S) -> S:
    return a._checked(a.value - 1)


# Overflow-reporting arithmetic ----------------------------------------------------------------------------------------

def overflowing_add(a: S, b: S | int) -> tuple[S, bool]:
    """(a + b wrapped, True if the exact sum was out of range)."""
    rhs = _rhs(a, b)
    return _overflowing(a, a.value + rhs)


def overflowing_subtract(a: S, b: S | int) -> tuple[S, bool]:
    rhs = _rhs(a, b)
    return _overflowing(a, a.value - rhs)


def overflowing_multiply(a: S, b: S | int) -> tuple[S, bool]:
    rhs = _rhs(a, b)
    return _overflowing(a, a.value * rhs)


# Division -------------------------------------------------------------------------------------------------------------

def divide(a: S, b: S | int) -> S:
    """a / b truncated toward zero; ZeroDivisionError on zero, OverflowError for MIN_VALUE / -1."""
    return a / _rhs(a, b)


def remainder(a: S, b: S | int) -> S:
    """Remainder of divide(a, b); takes the sign of a."""
    return a % _rhs(a, b)


def div_rem(a: S, b: S | int) -> tuple[S, S]:
    """(divide(a, b), remainder(a, b))."""
    return divide(a, b), remainder(a, b)


def abs_size(a: S) -> S:
    """|a|; OverflowError for the signed MIN_VALUE."""
    return abs(a)


# Shifts and bits ------------------------------------------------------------------------------------------------------

def shift_left(a: S, count: int) -> S:
    """a << count; count is masked to the bit width."""
    return a << _count(count)


def shift_right(a: S, count: int) -> S:
    """a >> count; arithmetic (sign-propagating) for signed sizes."""
    return a >> _count(count)


def unsigned_shift_right(a: S, count: int) -> S:
    """
    a >> count with zero fill, treating the bits as unsigned.

    Examples:
        >>> unsigned_shift_right(BinarySize(-1), 60).value
        15
    """
    mask = (1 << a.BITS) - 1
    return a._wrap((a.value & mask) >> (_count(count) & (a.BITS - 1)))


def rotate_left(a: S, count: int) -> S:
    bits = a.BITS
    count = _count(count) % bits
    raw = a.value & ((1 << bits) - 1)
    return a._wrap((raw << count) | (raw >> (bits - count)))


def rotate_right(a: S, count: int) -> S:
    return rotate_left(a, a.BITS - (_count(count) % a.BITS))


def bitwise_and(a: S, b: S | int) -> S:
    return a & _rhs(a, b)


def bitwise_or(a: S, b: S | int) -> S:
    return a | _rhs(a, b)


def bitwise_xor(a: S, b: S | int) -> S:
    return a ^ _rhs(a, b)


def ones_complement(a: S) -> S:
    return ~a


def leading_zero_count(a: SizeBase) -> int:
    """Leading zero bits in the fixed-width representation."""
    return a.BITS - (a.value & ((1 << a.BITS) - 1)).bit_length()


def trailing_zero_count(a: SizeBase) -> int:
    """Trailing zero bits in the fixed-width representation; BITS for zero."""
    raw = a.value & ((1 << a.BITS) - 1)
    if raw == 0:
        return a.BITS
    return (raw & -raw).bit_length() - 1


def pop_count(a: SizeBase) -> int:
    """Set bits in the fixed-width representation."""
    return (a.value & ((1 << a.BITS) - 1)).bit_count()


def is_power_of_two(a: SizeBase) -> bool:
    return a.value > 0 and a.value & (a.value - 1) == 0


def log2(a: SizeBase) -> int:
    """
    Integer base-2 logarithm (floor); 0 for zero.

    Raises:
        ValueError: a is negative.
    """
    if a.value < 0:
        raise ValueError(f"log2 of a negative size: {fmt_value(a.value)}")
    return max(a.value.bit_length() - 1, 0)


# Comparison helpers ---------------------------------------------------------------------------------------------------

def sign(a: SizeBase) -> int:
    """-1, 0 or 1."""
    return (a.value > 0) - (a.value < 0)


def min_size(a: S, b: S) -> S:
    return b if b < a else a


def max_size(a: S, b: S) -> S:
    return b if b > a else a


def clamp(a: S, lo: S, hi: S) -> S:
    """
    a limited to [lo, hi].

    Raises:
        ValueError: lo is greater than hi.
    """
    if lo > hi:
        raise ValueError(f"clamp bounds are reversed: {lo.value} > {hi.value}")
    return min_size(max_size(a, lo), hi)


# Private Methods ------------------------------------------------------------------------------------------------------

def _rhs(a: SizeBase, b) -> int:
    if not isinstance(a, SizeBase):
        raise TypeError(f"expected a size, but got {fmt_type(a)}")
    value = a._operand(b)
    if value is None:
        raise TypeError(f"cannot combine {fmt_type(a)} with {fmt_type(b)}")
    return value


def _count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise TypeError(f"shift count must be an int, but got {fmt_type(count)}")
    return count


def _overflowing(a: S, exact: int) -> tuple[S, bool]:
    return a._wrap(exact), not a.MIN <= exact <= a.MAX
