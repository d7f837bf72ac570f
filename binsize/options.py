#
# Binsize Parsing Options
#

# Standard library -----------------------------------------------------------------------------------------------------
from enum import IntFlag

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

class ParseOptions(IntFlag):
    """
    Options controlling how unit suffixes are interpreted when parsing a size.

    Attributes:
        DEFAULT: Short units only; "KB" and "K" mean 1024.
        USE_IEC_STANDARD: "KB" and "K" mean 1000; only "KiB"/"Ki" mean 1024.
        ALLOW_LONG_UNITS: Accept word forms like "kilobytes" and "kibibyte" as well as short forms.
        LONG_UNITS_ONLY: Accept only word forms; implies ALLOW_LONG_UNITS.
    """
    DEFAULT = 0
    USE_IEC_STANDARD = 1
    ALLOW_LONG_UNITS = 2
    LONG_UNITS_ONLY = 4


class NumberStyle(IntFlag):
    """
    Which elements the numeric part of a size string may contain.

    Composite members mirror the usual presets: INTEGER, NUMBER (the default for sizes),
    FLOAT and ANY.
    """
    NONE = 0
    ALLOW_LEADING_WHITE = 1
    ALLOW_TRAILING_WHITE = 2
    ALLOW_LEADING_SIGN = 4
    ALLOW_TRAILING_SIGN = 8
    ALLOW_PARENTHESES = 16
    ALLOW_DECIMAL_POINT = 32
    ALLOW_THOUSANDS = 64
    ALLOW_EXPONENT = 128

    INTEGER = ALLOW_LEADING_WHITE | ALLOW_TRAILING_WHITE | ALLOW_LEADING_SIGN
    NUMBER = INTEGER | ALLOW_TRAILING_SIGN | ALLOW_DECIMAL_POINT | ALLOW_THOUSANDS
    FLOAT = INTEGER | ALLOW_DECIMAL_POINT | ALLOW_EXPONENT
    ANY = NUMBER | ALLOW_PARENTHESES | ALLOW_EXPONENT


_VALID_OPTIONS = ParseOptions.USE_IEC_STANDARD | ParseOptions.ALLOW_LONG_UNITS | ParseOptions.LONG_UNITS_ONLY


# Methods --------------------------------------------------------------------------------------------------------------

def validate_options(options: ParseOptions | int) -> ParseOptions:
    """
    Check a ParseOptions value and return it as a ParseOptions.

    Raises:
        TypeError: options is not an int/ParseOptions.
        ValueError: options has bits set that are not defined by ParseOptions.
    """
    if isinstance(options, bool) or not isinstance(options, int):
        raise TypeError(f"options must be ParseOptions, but got {fmt_type(options)}")
    if int(options) & ~int(_VALID_OPTIONS):
        raise ValueError(f"invalid parse options: {fmt_value(int(options))}")
    return ParseOptions(options)


def validate_style(style: NumberStyle | int) -> NumberStyle:
    """Check a NumberStyle value and return it as a NumberStyle."""
    if isinstance(style, bool) or not isinstance(style, int):
        raise TypeError(f"style must be NumberStyle, but got {fmt_type(style)}")
    if int(style) & ~int(NumberStyle.ANY):
        raise ValueError(f"invalid number style: {fmt_value(int(style))}")
    return NumberStyle(style)


def allows_long(options: ParseOptions) -> bool:
    return bool(options & (ParseOptions.ALLOW_LONG_UNITS | ParseOptions.LONG_UNITS_ONLY))


def allows_short(options: ParseOptions) -> bool:
    return not options & ParseOptions.LONG_UNITS_ONLY
