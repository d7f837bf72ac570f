"""
Parse and format byte counts as human-readable size strings.

Format strings
--------------
A size format string has the shape ``[pattern][whitespace][prefix][i][B|byte][trailing]``:

- ``prefix`` is a scale letter. Uppercase ``K M G T P E`` scale by powers of 1024,
  lowercase ``k m g t p e`` by powers of 1000. ``A``/``a`` pick the largest unit in which
  the value is a whole number, ``S``/``s`` the largest unit in which the value is at
  least 1 (binary for uppercase, decimal for lowercase).
- ``i`` asks for the IEC prefix ("KiB") and always means binary.
- ``B`` (any case) appends the short byte word, ``byte`` (any case) switches to long
  unit words ("kibibytes").
- ``pattern`` is an optional numeric pattern ("0.#", "N2"); without one, every
  significant digit is written.
- ``whitespace`` and ``trailing`` are copied to the output verbatim.

None or "" means " SiB": ``126464`` formats as ``"123.5 KiB"``.

Parsing
-------
Parsing accepts ``[number][whitespace][prefix][connector][byte word]`` with the unit
strings of the culture's UnitTable. A bare SI prefix ("K", "KB") means 1024 unless
ParseOptions.USE_IEC_STANDARD is given.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from collections.abc import MutableSequence
from dataclasses import dataclass, replace
from decimal import Decimal, Context, Overflow
from enum import StrEnum, unique

# Local ----------------------------------------------------------------------------------------------------------------
from .culture import Culture, resolve_culture, parse_decimal, format_number
from .errors import FormatError
from .formatters import fmt_type, fmt_value
from .options import ParseOptions, NumberStyle, validate_options, validate_style
from .units import UnitStep, UnitTable, size_conf, steps_descending

_WIDE = Context(prec=200)


# Classes --------------------------------------------------------------------------------------------------------------

@unique
class AutoUnit(StrEnum):
    """
    Automatic unit selection modes.

    Attributes:
        FIXED (str)    : Largest unit that divides the value exactly - 126464 -> 126464 B
        ADAPTIVE (str) : Largest unit not exceeding the value - 126464 -> 123.5 KiB
    """
    FIXED = "fixed"
    ADAPTIVE = "adaptive"


@dataclass(frozen=True)
class FormatSpec:
    """
    A parsed size format string.

    Attributes:
        pattern: Numeric pattern applied to the scaled number, "" for all digits.
        whitespace: Literal text between the number and the unit.
        trailing: Literal whitespace after the unit.
        step: Unit step, or None while an automatic unit is still unresolved.
        auto: Automatic unit mode, None for an explicit step.
        binary: Scale by powers of 1024 (True) or 1000 (False).
        iec: Write IEC prefixes ("Ki") instead of SI ones ("K").
        byte: Write the byte word.
        long: Write word forms ("kibibytes") instead of abbreviations.
    """
    pattern: str = ""
    whitespace: str = ""
    trailing: str = ""
    step: UnitStep | None = UnitStep.BYTE
    auto: AutoUnit | None = None
    binary: bool = True
    iec: bool = False
    byte: bool = False
    long: bool = False

    @property
    def factor(self) -> int:
        """Bytes per displayed unit; only valid once the step is resolved."""
        if self.step is None:
            raise ValueError("automatic unit is not resolved, call resolve() first")
        return self.step.factor(self.binary)

    def resolve(self, magnitude: int) -> "FormatSpec":
        """
        Pick the unit step for an absolute byte count.

        Automatic units select the largest step whose factor does not exceed the magnitude
        (ADAPTIVE) or also divides it exactly (FIXED); zero and small values use bytes.
        The IEC marker is dropped for plain bytes.
        """
        step = self.step
        if self.auto is not None:
            step = UnitStep.BYTE
            for candidate in steps_descending:
                factor = candidate.factor(self.binary)
                if magnitude >= factor and (self.auto == AutoUnit.ADAPTIVE or magnitude % factor == 0):
                    step = candidate
                    break
        return replace(self, step=step, auto=None, iec=self.iec and step != UnitStep.BYTE)


# Methods --------------------------------------------------------------------------------------------------------------

def parse_format(fmt: str | None) -> FormatSpec:
    """
    Parse a size format string.

    Examples:
        >>> parse_format("0.# KiB").pattern, parse_format("0.# KiB").step
        ('0.#', <UnitStep.KILO: 1>)
        >>> parse_format("kB").binary
        False
    """
    if fmt is None or fmt == "":
        fmt = size_conf.DEFAULT_FORMAT
    if not isinstance(fmt, str):
        raise TypeError(f"format must be str or None, but got {fmt_type(fmt)}")

    trimmed = fmt.rstrip()
    trailing = fmt[len(trimmed):]
    byte = long = False

    if trimmed[-4:].lower() == "byte":
        trimmed, byte, long = trimmed[:-4], True, True
    elif trimmed[-1:].lower() == "b":
        trimmed, byte = trimmed[:-1], True

    if not trimmed:
        return FormatSpec(trailing=trailing, byte=byte, long=long)

    index = len(trimmed) - 1
    iec = len(trimmed) > 1 and trimmed[index] in "iI"
    if iec:
        index -= 1

    letter = trimmed[index]
    if iec:
        letter = letter.upper()  # "i" forces binary

    step, auto, binary = UnitStep.BYTE, None, True
    if letter in "AaSs":
        auto = AutoUnit.FIXED if letter in "Aa" else AutoUnit.ADAPTIVE
        binary = letter.isupper()
        step = None
    elif UnitStep.from_letter(letter) is not None:
        step = UnitStep.from_letter(letter)
        binary = letter.isupper()
    else:
        iec = False  # an "i" without a scale letter is part of the pattern
        index = len(trimmed)

    number = trimmed[:index]
    pattern = number.rstrip()
    return FormatSpec(
        pattern=pattern,
        whitespace=number[len(pattern):],
        trailing=trailing,
        step=step,
        auto=auto,
        binary=binary,
        iec=iec,
        byte=byte,
        long=long,
    )


def format_size(value: int, fmt: str | None = None, culture: Culture | UnitTable | str | None = None) -> str:
    """
    Format a byte count.

    Args:
        value: Byte count.
        fmt: Size format string, see the module docstring; None for " SiB".
        culture: Number symbols and unit strings; invariant when None.

    Raises:
        FormatError: fmt contains an unsupported numeric pattern.

    Examples:
        >>> format_size(126464)
        '123.5 KiB'
        >>> format_size(512, "KB")
        '0.5KB'
        >>> format_size(1234000, "sB")
        '1.234MB'
    """
    culture = resolve_culture(culture)
    spec = parse_format(fmt).resolve(abs(value))
    scaled = scale_quotient(value, spec.factor)
    number = format_number(scaled, spec.pattern, culture)
    return number + spec.whitespace + _unit_text(spec, scaled, culture.units) + spec.trailing


def try_format_size(
        value: int,
        buffer: MutableSequence[str],
        fmt: str | None = None,
        culture: Culture | UnitTable | str | None = None,
) -> tuple[bool, int]:
    """
    Format a byte count into a caller-owned character buffer.

    Returns:
        (True, chars_written) on success; (False, 0) if the buffer is too small, in
        which case the buffer is left untouched.
    """
    text = format_size(value, fmt, culture)
    if len(text) > len(buffer):
        return False, 0
    for i, ch in enumerate(text):
        buffer[i] = ch
    return True, len(text)


def scale_quotient(value: int, factor: int) -> Decimal:
    """
    value / factor as an exact Decimal.

    Factors are products of 2 and 5, so the quotient always terminates: at most 60
    fractional digits for a 64-bit value, well inside the working precision. Parsing
    the rendered quotient back therefore restores value exactly.

    Examples:
        >>> scale_quotient(123456789012345678, 1024)
        Decimal('120563270519868.826171875')
    """
    return _WIDE.divide(Decimal(value), Decimal(factor))


def parse_size(
        text: str,
        options: ParseOptions = ParseOptions.DEFAULT,
        style: NumberStyle = NumberStyle.NUMBER,
        culture: Culture | UnitTable | str | None = None,
) -> Decimal:
    """
    Parse a size string into an exact, unrounded byte count.

    Whitespace around the whole string and between number and unit is always allowed.
    The empty string is zero. The caller truncates and range-checks the result.

    Raises:
        FormatError: text is not a size string.
        OverflowError: The exponent is too large to represent the byte count.
        TypeError: text is not a str.

    Examples:
        >>> parse_size("123KB")
        Decimal('125952')
        >>> parse_size("123KB", ParseOptions.USE_IEC_STANDARD)
        Decimal('123000')
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, but got {fmt_type(text)}")
    options = validate_options(options)
    style = validate_style(style)
    culture = resolve_culture(culture)

    if text == "":
        return Decimal(0)

    stripped = text.strip()
    if not stripped:
        raise FormatError("size string contains only whitespace")

    match = culture.units.match(stripped, options)
    if match is None:
        number, factor = stripped, 1
    else:
        number, factor = match.number.rstrip(), match.step.factor(match.binary)

    amount = parse_decimal(number, style, culture)
    try:
        return _WIDE.multiply(amount, Decimal(factor))
    except Overflow as e:
        raise OverflowError(f"size value is out of range: {fmt_value(text)}") from e


def try_parse_size(
        text: str,
        options: ParseOptions = ParseOptions.DEFAULT,
        style: NumberStyle = NumberStyle.NUMBER,
        culture: Culture | UnitTable | str | None = None,
) -> tuple[bool, Decimal | None]:
    """Like parse_size(), but returns (False, None) instead of raising FormatError/OverflowError."""
    try:
        return True, parse_size(text, options, style, culture)
    except (FormatError, OverflowError):
        return False, None


# Private Methods ------------------------------------------------------------------------------------------------------

def _unit_text(spec: FormatSpec, scaled: Decimal, units: UnitTable) -> str:
    prefix = units.prefix(spec.step, iec=spec.iec, long=spec.long, decimal=not spec.binary)
    text = prefix
    if spec.byte:
        if prefix:
            text += units.connector(long=spec.long)
        text += units.byte_word(long=spec.long, singular=scaled == 1)
    return text
