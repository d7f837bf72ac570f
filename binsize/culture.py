"""
Culture-aware number handling for size strings.

A Culture bundles number symbols (decimal and group separators, signs) with the UnitTable
used for unit suffixes. It is an explicit, immutable configuration object; nothing here
reads ambient locale state unless Culture.current() is called.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import locale
import re
from dataclasses import dataclass, fields, replace
from decimal import Decimal, Context, ROUND_HALF_UP, InvalidOperation
from typing import Self

# Third-party ----------------------------------------------------------------------------------------------------------
from frozendict import frozendict

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import FormatError
from .formatters import fmt_type, fmt_value
from .options import NumberStyle, validate_style
from .units import UnitTable, INVARIANT_UNITS

_WIDE = Context(prec=200)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)")


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Culture:
    """
    Number symbols and unit strings used to parse and format sizes.

    Attributes:
        name: Culture name, "" for the invariant culture.
        decimal_separator: Separator between integer and fractional digits.
        group_separator: Thousands separator; "" disables grouping.
        group_size: Digits per group.
        negative_sign: Sign written before negative numbers.
        positive_sign: Optional sign accepted before positive numbers.
        units: Unit strings for this culture.
    """
    name: str = ""
    decimal_separator: str = "."
    group_separator: str = ","
    group_size: int = 3
    negative_sign: str = "-"
    positive_sign: str = "+"
    units: UnitTable = INVARIANT_UNITS

    def __post_init__(self):
        for name in ("name", "decimal_separator", "group_separator", "negative_sign", "positive_sign"):
            val = getattr(self, name)
            if not isinstance(val, str):
                raise TypeError(f"Culture.{name} must be str, but got {fmt_type(val)}")
        for name in ("decimal_separator", "negative_sign", "positive_sign"):
            if not getattr(self, name):
                raise ValueError(f"Culture.{name} must be a non-empty string")
        if isinstance(self.group_size, bool) or not isinstance(self.group_size, int):
            raise TypeError(f"Culture.group_size must be int, but got {fmt_type(self.group_size)}")
        if self.group_size < 1:
            raise ValueError(f"Culture.group_size must be >=1, but got {fmt_value(self.group_size)}")
        if not isinstance(self.units, UnitTable):
            raise TypeError(f"Culture.units must be UnitTable, but got {fmt_type(self.units)}")

    def merge(self, **overrides) -> Self:
        """Create a new Culture with the given fields replaced."""
        names = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise TypeError(f"unknown Culture fields: {', '.join(unknown)}")
        return replace(self, **overrides)

    @classmethod
    def invariant(cls) -> "Culture":
        return INVARIANT

    @classmethod
    def get(cls, name: str) -> "Culture":
        """
        Look up a registered culture by name, e.g. "nl-NL".

        Raises:
            KeyError: No culture is registered under that name.
        """
        try:
            return CULTURES[name]
        except KeyError:
            raise KeyError(f"unknown culture: {fmt_value(name)}") from None

    @classmethod
    def current(cls) -> "Culture":
        """Snapshot the number symbols of the current process locale."""
        conv = locale.localeconv()
        grouping = [g for g in conv.get("grouping") or [] if 0 < g < locale.CHAR_MAX]
        return cls(
            name=locale.getlocale()[0] or "",
            decimal_separator=conv.get("decimal_point") or ".",
            group_separator=conv.get("thousands_sep") or "",
            group_size=grouping[0] if grouping else 3,
            negative_sign=conv.get("negative_sign") or "-",
            positive_sign=conv.get("positive_sign") or "+",
        )


INVARIANT = Culture()

CULTURES = frozendict({
    "": INVARIANT,
    "en-US": Culture(name="en-US"),
    "en-GB": Culture(name="en-GB"),
    "nl-NL": Culture(name="nl-NL", decimal_separator=",", group_separator="."),
    "de-DE": Culture(name="de-DE", decimal_separator=",", group_separator="."),
    "fr-FR": Culture(name="fr-FR", decimal_separator=",", group_separator="\u202f"),
    "de-CH": Culture(name="de-CH", decimal_separator=".", group_separator="’"),
})


# Methods --------------------------------------------------------------------------------------------------------------

def resolve_culture(culture: "Culture | UnitTable | str | None") -> Culture:
    """
    Normalize a culture argument.

    None means the invariant culture. A bare UnitTable is combined with invariant number
    symbols. A str is looked up in the registry.
    """
    if culture is None:
        return INVARIANT
    if isinstance(culture, Culture):
        return culture
    if isinstance(culture, UnitTable):
        return INVARIANT.merge(units=culture)
    if isinstance(culture, str):
        return Culture.get(culture)
    raise TypeError(f"culture must be Culture, UnitTable, str or None, but got {fmt_type(culture)}")


def parse_decimal(text: str, style: NumberStyle = NumberStyle.NUMBER, culture: Culture | None = None) -> Decimal:
    """
    Parse a culture-formatted number into an exact Decimal.

    Args:
        text: Number text, e.g. "1,234.5" (invariant) or "1.234,5" (nl-NL).
        style: Elements permitted in the text.
        culture: Number symbols; invariant when None.

    Raises:
        FormatError: text is not a number permitted by style.

    Examples:
        >>> parse_decimal("1,234.5")
        Decimal('1234.5')
        >>> parse_decimal("5-")
        Decimal('-5')
    """
    if not isinstance(text, str):
        raise TypeError(f"text must be str, but got {fmt_type(text)}")
    style = validate_style(style)
    culture = resolve_culture(culture)
    s = text

    if style & NumberStyle.ALLOW_LEADING_WHITE:
        s = s.lstrip()
    if style & NumberStyle.ALLOW_TRAILING_WHITE:
        s = s.rstrip()

    negative = None
    if style & NumberStyle.ALLOW_PARENTHESES and len(s) > 1 and s[0] == "(" and s[-1] == ")":
        s, negative = s[1:-1], True
    if negative is None and style & NumberStyle.ALLOW_LEADING_SIGN:
        s, negative = _strip_sign(s, culture, leading=True)
    if negative is None and style & NumberStyle.ALLOW_TRAILING_SIGN:
        s, negative = _strip_sign(s, culture, leading=False)

    i, n = 0, len(s)
    int_digits = []
    group = culture.group_separator if style & NumberStyle.ALLOW_THOUSANDS else ""
    while i < n:
        if "0" <= s[i] <= "9":
            int_digits.append(s[i])
            i += 1
        elif group and int_digits and s.startswith(group, i):
            i += len(group)
        else:
            break

    frac_digits = []
    if style & NumberStyle.ALLOW_DECIMAL_POINT and s.startswith(culture.decimal_separator, i):
        i += len(culture.decimal_separator)
        while i < n and "0" <= s[i] <= "9":
            frac_digits.append(s[i])
            i += 1

    if not int_digits and not frac_digits:
        raise FormatError(f"not a valid number: {fmt_value(text)}")

    exponent = "0"
    if style & NumberStyle.ALLOW_EXPONENT and i < n and s[i] in "eE":
        m = _EXPONENT.match(s, i)
        if not m:
            raise FormatError(f"invalid exponent in number: {fmt_value(text)}")
        exponent = m.group(1)
        i = m.end()

    if i != n:
        raise FormatError(f"not a valid number: {fmt_value(text)}")

    fraction = "." + "".join(frac_digits) if frac_digits else ""
    literal = f"{'-' if negative else ''}{''.join(int_digits) or '0'}{fraction}E{exponent}"
    try:
        return Decimal(literal)
    except InvalidOperation as e:
        raise FormatError(f"not a valid number: {fmt_value(text)}") from e


def format_number(value: Decimal | int, pattern: str = "", culture: Culture | None = None) -> str:
    """
    Format a number with an optional numeric pattern.

    An empty pattern writes every significant digit of value with no grouping. Standard
    patterns "F<n>" (fixed) and "N<n>" (grouped) round to n fractional digits, 2 by default.
    Custom patterns use "0" (required digit), "#" (optional digit), "." (decimal
    separator), "," (grouping, or scaling by 1000 when placed right before the decimal
    separator) and quoted or backslash-escaped literals. Rounding is half away from zero.

    Raises:
        FormatError: pattern is not a supported numeric pattern.

    Examples:
        >>> format_number(Decimal("109.65"), "0.#")
        '109.7'
        >>> format_number(Decimal("1234567.5"), "N1", Culture.get("nl-NL"))
        '1.234.567,5'
    """
    culture = resolve_culture(culture)
    value = Decimal(value)

    if not pattern:
        return _format_plain(value, culture)

    m = re.fullmatch(r"([A-Za-z])(\d{1,2})?", pattern)
    if m:
        kind, digits = m.group(1).upper(), m.group(2)
        if kind not in ("F", "N"):
            raise FormatError(f"unsupported numeric format: {fmt_value(pattern)}")
        places = 2 if digits is None else int(digits)
        return _assemble(value, culture, min_int=1, min_frac=places, max_frac=places, grouped=kind == "N")

    return _format_custom(value, pattern, culture)


# Private Methods ------------------------------------------------------------------------------------------------------

def _strip_sign(s: str, culture: Culture, leading: bool) -> tuple[str, bool | None]:
    for sign, negative in ((culture.negative_sign, True), (culture.positive_sign, False)):
        if leading and s.startswith(sign):
            return s[len(sign):], negative
        if not leading and s.endswith(sign):
            return s[:-len(sign)], negative
    return s, None


def _format_plain(value: Decimal, culture: Culture) -> str:
    """All significant digits, no exponent, no trailing fractional zeros."""
    digits = format(value.copy_abs().normalize(_WIDE), "f")
    int_part, _, frac_part = digits.partition(".")
    sign = culture.negative_sign if value < 0 else ""
    if frac_part:
        return f"{sign}{int_part}{culture.decimal_separator}{frac_part}"
    return f"{sign}{int_part}"


def _assemble(
        value: Decimal,
        culture: Culture,
        *,
        min_int: int,
        min_frac: int,
        max_frac: int,
        grouped: bool,
        before: str = "",
        after_int: str = "",
        frac_tokens: list | None = None,
        after: str = "",
        force_point: bool = False,
) -> str:
    # The quantized result carries every integer digit plus max_frac fractional digits.
    context = Context(prec=max(_WIDE.prec, value.adjusted() + max_frac + 25))
    rounded = value.copy_abs().quantize(Decimal(1).scaleb(-max_frac), rounding=ROUND_HALF_UP, context=context)
    int_str, _, frac_str = format(rounded, "f").partition(".")
    frac_str = frac_str.ljust(max_frac, "0")[:max_frac]
    while len(frac_str) > min_frac and frac_str.endswith("0"):
        frac_str = frac_str[:-1]

    if int_str == "0" and min_int == 0:
        int_str = ""
    int_str = int_str.zfill(min_int)
    if grouped and culture.group_separator:
        int_str = _group_digits(int_str, culture.group_separator, culture.group_size)

    if frac_tokens is not None:
        frac_out = _fill_fraction(frac_tokens, frac_str)
    else:
        frac_out = frac_str

    point = culture.decimal_separator if (frac_str or force_point) else ""
    sign = culture.negative_sign if value < 0 and rounded != 0 else ""
    if not int_str and not frac_str:
        int_str = "0"
    return f"{sign}{before}{int_str}{after_int}{point}{frac_out}{after}"


def _fill_fraction(tokens: list, frac_str: str) -> str:
    """Interleave fractional digits with literal tokens in pattern order."""
    out = []
    digits = iter(frac_str)
    for kind, text in tokens:
        if kind in ("0", "#"):
            out.append(next(digits, ""))
        else:
            out.append(text)
    return "".join(out)


def _group_digits(digits: str, separator: str, size: int) -> str:
    groups = []
    while len(digits) > size:
        groups.insert(0, digits[-size:])
        digits = digits[:-size]
    groups.insert(0, digits)
    return separator.join(groups)


def _tokenize(pattern: str) -> list[tuple[str, str]]:
    """Split a custom numeric pattern into ("0"|"#"|"."|","|"lit", text) tokens."""
    tokens = []
    i = 0
    while i < len(pattern):
        c = pattern[i]
        if c in "0#.,":
            tokens.append((c, c))
            i += 1
        elif c in "'\"":
            end = pattern.find(c, i + 1)
            if end < 0:
                raise FormatError(f"unterminated quote in numeric format: {fmt_value(pattern)}")
            tokens.append(("lit", pattern[i + 1:end]))
            i = end + 1
        elif c == "\\" and i + 1 < len(pattern):
            tokens.append(("lit", pattern[i + 1]))
            i += 2
        else:
            tokens.append(("lit", c))
            i += 1
    return tokens


def _format_custom(value: Decimal, pattern: str, culture: Culture) -> str:
    tokens = _tokenize(pattern)
    if not any(kind in ("0", "#") for kind, _ in tokens):
        raise FormatError(f"numeric format has no digit placeholders: {fmt_value(pattern)}")

    point = next((i for i, (kind, _) in enumerate(tokens) if kind == "."), len(tokens))
    int_tokens = tokens[:point]
    frac_tokens = [("lit", text) if kind in (".", ",") else (kind, text) for kind, text in tokens[point + 1:]]

    placeholder_idx = [i for i, (kind, _) in enumerate(int_tokens) if kind in ("0", "#")]
    first, last = (placeholder_idx[0], placeholder_idx[-1]) if placeholder_idx else (len(int_tokens), -1)

    # Commas right of the last integer placeholder scale by 1000, commas between placeholders group.
    scale_commas = sum(1 for kind, _ in int_tokens[last + 1:] if kind == ",")
    grouped = any(kind == "," for kind, _ in int_tokens[first:last + 1])
    if scale_commas:
        value = value.scaleb(-3 * scale_commas, context=_WIDE)

    int_kinds = [int_tokens[i][0] for i in placeholder_idx]
    min_int = len(int_kinds) - int_kinds.index("0") if "0" in int_kinds else 0

    frac_kinds = [kind for kind, _ in frac_tokens if kind in ("0", "#")]
    max_frac = len(frac_kinds)
    min_frac = max((i + 1 for i, kind in enumerate(frac_kinds) if kind == "0"), default=0)

    before = "".join(text for kind, text in int_tokens[:first] if kind == "lit")
    after_int = "".join(text for kind, text in int_tokens[first:] if kind == "lit")

    if max_frac:
        return _assemble(value, culture, min_int=min_int, min_frac=min_frac, max_frac=max_frac, grouped=grouped,
                         before=before, after_int=after_int, frac_tokens=frac_tokens)
    after = "".join(text for _, text in frac_tokens)
    return _assemble(value, culture, min_int=min_int, min_frac=0, max_frac=0, grouped=grouped,
                     before=before, after_int=after_int, after=after)
