#
# Binsize Size Quantities
#

# Standard library -----------------------------------------------------------------------------------------------------
import operator
from collections.abc import MutableSequence
from dataclasses import dataclass
from decimal import Decimal, Context
from fractions import Fraction
from typing import ClassVar, Self

# Local ----------------------------------------------------------------------------------------------------------------
from .culture import Culture
from .engine import format_size, try_format_size, parse_size
from .errors import FormatError
from .formatters import fmt_type
from .numeric import std_magnitude, truncate_to_int
from .options import ParseOptions, NumberStyle, validate_options
from .units import UnitTable, size_conf, KIBI, MEBI, GIBI, TEBI, PEBI, EXBI

Real = int | float | Decimal | Fraction
CultureLike = Culture | UnitTable | str | None

_EXACT = Context(prec=200)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True, order=True)
class SizeBase:
    """
    Base for fixed-width byte count quantities.

    A size holds one integer byte count within [MIN, MAX] and never changes. Subclasses
    fix the range and the parsing defaults; all arithmetic returns the subclass type.

    Operators `+ - *` and unary `-` raise OverflowError when the result leaves the range;
    see binsize.ops for wrapping variants. `/` and `%` truncate toward zero. Shifts mask
    the count to 6 bits and wrap. Arithmetic accepts sizes of the same signedness and
    plain ints; equality and ordering only compare sizes of the same type.
    """
    BITS: ClassVar[int] = size_conf.BITS
    SIGNED: ClassVar[bool] = True
    MIN: ClassVar[int] = -2**63
    MAX: ClassVar[int] = 2**63 - 1
    FORCED_OPTIONS: ClassVar[ParseOptions] = ParseOptions.DEFAULT

    ZERO: ClassVar["SizeBase"]
    MIN_VALUE: ClassVar["SizeBase"]
    MAX_VALUE: ClassVar["SizeBase"]

    value: int = 0

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.ZERO = cls(0)
        cls.MIN_VALUE = cls(cls.MIN)
        cls.MAX_VALUE = cls(cls.MAX)

    def __post_init__(self):
        """Validate that value is an integer within range."""
        value = self.value
        if isinstance(value, bool) or not hasattr(value, "__index__"):
            raise TypeError(f"{type(self).__name__} value must be an int, but got {fmt_type(value)}")
        value = operator.index(value)
        if value < self.MIN or value > self.MAX:
            raise OverflowError(f"value {value} is out of range for {type(self).__name__} [{self.MIN}, {self.MAX}]")
        object.__setattr__(self, "value", value)

    # ----- Scaled constructors and views -----

    @classmethod
    def from_kibi(cls, value: Real) -> Self:
        """Size of value KiB, truncated toward zero."""
        return cls._from_scaled(value, KIBI)

    @classmethod
    def from_mebi(cls, value: Real) -> Self:
        """Size of value MiB, truncated toward zero."""
        return cls._from_scaled(value, MEBI)

    @classmethod
    def from_gibi(cls, value: Real) -> Self:
        """Size of value GiB, truncated toward zero."""
        return cls._from_scaled(value, GIBI)

    @classmethod
    def from_tebi(cls, value: Real) -> Self:
        """Size of value TiB, truncated toward zero."""
        return cls._from_scaled(value, TEBI)

    @classmethod
    def from_pebi(cls, value: Real) -> Self:
        """Size of value PiB, truncated toward zero."""
        return cls._from_scaled(value, PEBI)

    @classmethod
    def from_exbi(cls, value: Real) -> Self:
        """Size of value EiB, truncated toward zero."""
        return cls._from_scaled(value, EXBI)

    @classmethod
    def _from_scaled(cls, value: Real, factor: int) -> Self:
        magnitude = std_magnitude(value)
        if isinstance(magnitude, Decimal):
            magnitude = _EXACT.multiply(magnitude, Decimal(factor))
        else:
            magnitude *= factor
        return cls(truncate_to_int(magnitude, cls.MIN, cls.MAX, cls.__name__))

    @property
    def as_kibi(self) -> float:
        return self.value / KIBI

    @property
    def as_mebi(self) -> float:
        return self.value / MEBI

    @property
    def as_gibi(self) -> float:
        return self.value / GIBI

    @property
    def as_tebi(self) -> float:
        return self.value / TEBI

    @property
    def as_pebi(self) -> float:
        return self.value / PEBI

    @property
    def as_exbi(self) -> float:
        return self.value / EXBI

    # ----- Parsing -----

    @classmethod
    def parse(
            cls,
            text: str,
            options: ParseOptions = ParseOptions.DEFAULT,
            style: NumberStyle = NumberStyle.NUMBER,
            culture: CultureLike = None,
    ) -> Self:
        """
        Parse a size string such as "123KB", "1.5 GiB" or "2 mebibytes".

        Args:
            text: Size string. "" is zero.
            options: Unit interpretation; see ParseOptions.
            style: Elements allowed in the number.
            culture: Number symbols and unit strings; invariant when None.

        Raises:
            FormatError: text is not a size string.
            OverflowError: The size does not fit this type.
        """
        options = validate_options(options) | cls.FORCED_OPTIONS
        amount = parse_size(text, options, style, culture)
        return cls(truncate_to_int(amount, cls.MIN, cls.MAX, cls.__name__))

    @classmethod
    def try_parse(
            cls,
            text: str | None,
            options: ParseOptions = ParseOptions.DEFAULT,
            style: NumberStyle = NumberStyle.NUMBER,
            culture: CultureLike = None,
    ) -> tuple[bool, Self]:
        """Like parse(), but returns (False, ZERO) instead of raising FormatError/OverflowError."""
        if text is None:
            return False, cls.ZERO
        try:
            return True, cls.parse(text, options, style, culture)
        except (FormatError, OverflowError):
            return False, cls.ZERO

    # ----- Formatting -----

    def to_text(self, format: str | None = None, culture: CultureLike = None) -> str:
        """
        Format this size; see binsize.engine for the format string grammar.

        Examples:
            >>> BinarySize(126464).to_text()
            '123.5 KiB'
            >>> BinarySize(126464).to_text("0.# KB")
            '123.5 KB'
        """
        return format_size(self.value, format, culture)

    def try_format_into(
            self,
            buffer: MutableSequence[str],
            format: str | None = None,
            culture: CultureLike = None,
    ) -> tuple[bool, int]:
        """Write to_text(format, culture) into buffer; (False, 0) if it does not fit."""
        return try_format_size(self.value, buffer, format, culture)

    def __str__(self) -> str:
        return self.to_text()

    def __format__(self, format_spec: str) -> str:
        return self.to_text(format_spec or None)

    # ----- Conversions -----

    def __int__(self) -> int:
        return self.value

    def __index__(self) -> int:
        return self.value

    def __float__(self) -> float:
        return float(self.value)

    def __bool__(self) -> bool:
        return self.value != 0

    # ----- Range helpers -----

    @classmethod
    def _checked(cls, value: int) -> Self:
        if value < cls.MIN or value > cls.MAX:
            raise OverflowError(f"{cls.__name__} arithmetic overflow: {value} is out of range")
        return cls(value)

    @classmethod
    def _wrap(cls, value: int) -> Self:
        value &= (1 << cls.BITS) - 1
        if cls.SIGNED and value >= 1 << (cls.BITS - 1):
            value -= 1 << cls.BITS
        return cls(value)

    def _operand(self, other) -> int | None:
        if isinstance(other, SizeBase):
            return other.value if other.SIGNED == self.SIGNED else None
        if isinstance(other, int) and not isinstance(other, bool):
            return other
        return None

    # ----- Arithmetic operators -----

    def __add__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._checked(self.value + rhs)

    __radd__ = __add__

    def __sub__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._checked(self.value - rhs)

    def __rsub__(self, other) -> Self:
        lhs = self._operand(other)
        return NotImplemented if lhs is None else self._checked(lhs - self.value)

    def __mul__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._checked(self.value * rhs)

    __rmul__ = __mul__

    def __truediv__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._checked(_trunc_div(self.value, rhs))

    def __mod__(self, other) -> Self:
        rhs = self._operand(other)
        if rhs is None:
            return NotImplemented
        return self._checked(self.value - rhs * _trunc_div(self.value, rhs))

    def __neg__(self) -> Self:
        return self._checked(-self.value)

    def __pos__(self) -> Self:
        return self

    def __abs__(self) -> Self:
        return self._checked(abs(self.value))

    # ----- Bitwise operators -----

    def __invert__(self) -> Self:
        return self._wrap(~self.value)

    def __and__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._wrap(self.value & rhs)

    __rand__ = __and__

    def __or__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._wrap(self.value | rhs)

    __ror__ = __or__

    def __xor__(self, other) -> Self:
        rhs = self._operand(other)
        return NotImplemented if rhs is None else self._wrap(self.value ^ rhs)

    __rxor__ = __xor__

    def __lshift__(self, count: int) -> Self:
        if isinstance(count, bool) or not isinstance(count, int):
            return NotImplemented
        return self._wrap(self.value << (count & (self.BITS - 1)))

    def __rshift__(self, count: int) -> Self:
        if isinstance(count, bool) or not isinstance(count, int):
            return NotImplemented
        return self._wrap(self.value >> (count & (self.BITS - 1)))


class BinarySize(SizeBase):
    """
    Signed 64-bit byte count.

    Examples:
        >>> BinarySize.parse("123KB")
        BinarySize(value=125952)
        >>> str(BinarySize.from_kibi(1.5))
        '1.5 KiB'
        >>> f"{BinarySize(123456789012345678):0.# SB}"
        '109.7 PB'
    """
    SIGNED = True
    MIN = -2**63
    MAX = 2**63 - 1


class UBinarySize(SizeBase):
    """Unsigned 64-bit byte count. Parsing a negative size raises OverflowError."""
    SIGNED = False
    MIN = 0
    MAX = 2**64 - 1


class IecBinarySize(BinarySize):
    """BinarySize that always parses bare SI prefixes as decimal: "1KB" is 1000 bytes, "1KiB" 1024."""
    FORCED_OPTIONS = ParseOptions.USE_IEC_STANDARD


class UIecBinarySize(UBinarySize):
    """UBinarySize that always parses bare SI prefixes as decimal: "1KB" is 1000 bytes, "1KiB" 1024."""
    FORCED_OPTIONS = ParseOptions.USE_IEC_STANDARD


SIZE_TYPES = (BinarySize, UBinarySize, IecBinarySize, UIecBinarySize)


# Private Methods ------------------------------------------------------------------------------------------------------

def _trunc_div(a: int, b: int) -> int:
    """Integer division truncating toward zero; ZeroDivisionError on b == 0."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q
