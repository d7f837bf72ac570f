"""
Explicit conversions between sizes, strings and plain numbers.

SizeConverter is a closed conversion table for one size type: the supported source and
target types are listed up front and anything else raises TypeError. It is meant for
settings loaders, form binders and other code that needs "convert this value to a size"
without knowing the concrete input type.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import logging
from decimal import Decimal
from fractions import Fraction
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .culture import Culture
from .formatters import fmt_type
from .numeric import std_magnitude, truncate_to_int
from .options import ParseOptions, validate_options
from .size import SizeBase, SIZE_TYPES
from .units import UnitTable

log = logging.getLogger(__name__)

NUMBER_TYPES = (int, float, Decimal, Fraction)


# Classes --------------------------------------------------------------------------------------------------------------

class SizeConverter:
    """
    Convert values to and from one size type.

    Sources: str (parsed with the converter's options), any size type (raw byte count,
    range-checked), int/float/Decimal/Fraction (truncated toward zero).
    Targets: str (default size format), any size type (raw byte count, range-checked),
    int/float/Decimal/Fraction (byte count).

    Examples:
        >>> conv = SizeConverter(UBinarySize)
        >>> conv.convert_from("123KB")
        UBinarySize(value=125952)
        >>> conv.convert_to(UBinarySize(125952), str)
        '123 KiB'
        >>> conv.convert_to(UBinarySize(1234), BinarySize)
        BinarySize(value=1234)
    """

    SOURCE_TYPES: tuple[type, ...] = (str, *SIZE_TYPES, *NUMBER_TYPES)
    TARGET_TYPES: tuple[type, ...] = (str, *SIZE_TYPES, *NUMBER_TYPES)

    def __init__(self, target: type[SizeBase], options: ParseOptions = ParseOptions.DEFAULT):
        if target not in SIZE_TYPES:
            raise TypeError(f"target must be one of {', '.join(t.__name__ for t in SIZE_TYPES)}, "
                            f"but got {fmt_type(target)}")
        self.target = target
        self.options = validate_options(options) | target.FORCED_OPTIONS

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.target.__name__}, options={self.options!r})"

    def can_convert_from(self, source_type: type) -> bool:
        return source_type in self.SOURCE_TYPES

    def can_convert_to(self, target_type: type) -> bool:
        return target_type in self.TARGET_TYPES

    def convert_from(self, value: Any, culture: Culture | UnitTable | str | None = None) -> SizeBase:
        """
        Convert value to the target size type.

        Raises:
            TypeError: The type of value is not a supported source.
            FormatError: value is a str that is not a size string.
            OverflowError: The byte count does not fit the target type.
            ValueError: value is NaN.
        """
        source_type = type(value)
        if not self.can_convert_from(source_type):
            raise TypeError(f"cannot convert {fmt_type(value)} to {self.target.__name__}")

        if source_type is str:
            return self.target.parse(value, self.options, culture=culture)
        if isinstance(value, SizeBase):
            return self._reinterpret(value.value)
        return self._reinterpret(std_magnitude(value))

    def convert_to(self, size: SizeBase, target_type: type, culture: Culture | UnitTable | str | None = None) -> Any:
        """
        Convert a size of this converter's type to target_type.

        Raises:
            TypeError: size is not of the converter's type, or target_type is unsupported.
            OverflowError: The byte count does not fit a size target type.
        """
        if type(size) is not self.target:
            raise TypeError(f"expected {self.target.__name__}, but got {fmt_type(size)}")
        if not self.can_convert_to(target_type):
            raise TypeError(f"cannot convert {self.target.__name__} to {fmt_type(target_type)}")

        if target_type is str:
            return size.to_text(culture=culture)
        if target_type in SIZE_TYPES:
            return SizeConverter(target_type)._reinterpret(size.value)
        if target_type is Fraction:
            return Fraction(size.value)
        return target_type(size.value)

    def _reinterpret(self, magnitude: int | Decimal) -> SizeBase:
        try:
            return self.target(truncate_to_int(magnitude, self.target.MIN, self.target.MAX, self.target.__name__))
        except OverflowError:
            log.debug("byte count %s does not fit %s", magnitude, self.target.__name__)
            raise


# Methods --------------------------------------------------------------------------------------------------------------

def converter_for(target: type[SizeBase]) -> SizeConverter:
    """Default converter for a size type; IEC size types parse with USE_IEC_STANDARD."""
    return SizeConverter(target)
