#
# Binsize Units of Measurement
#

# Standard library -----------------------------------------------------------------------------------------------------
from dataclasses import dataclass, fields, replace
from enum import IntEnum, unique
from typing import NamedTuple, Self

# Local ----------------------------------------------------------------------------------------------------------------
from .collections import BiDirectionalMap
from .formatters import fmt_type, fmt_value
from .options import ParseOptions, allows_long, allows_short


# @formatter:off

class SizeConf:
    DEFAULT_FORMAT = " SiB"     # Automatic-adaptive, binary, short, with a space
    BITS = 64                   # Width of every size type


size_conf = SizeConf()

KIBI = 1024
MEBI = 1024 * KIBI
GIBI = 1024 * MEBI
TEBI = 1024 * GIBI
PEBI = 1024 * TEBI
EXBI = 1024 * PEBI

KILO = 1000
MEGA = 1000 * KILO
GIGA = 1000 * MEGA
TERA = 1000 * GIGA
PETA = 1000 * TERA
EXA  = 1000 * PETA

# @formatter:on

# Classes --------------------------------------------------------------------------------------------------------------

@unique
class UnitStep(IntEnum):
    """
    Magnitude steps of a byte count, from plain bytes up to exa/exbi.

    The step value is the exponent of the unit factor: 1024**step for binary units,
    1000**step for decimal ones.
    """
    BYTE = 0
    KILO = 1
    MEGA = 2
    GIGA = 3
    TERA = 4
    PETA = 5
    EXA = 6

    def factor(self, binary: bool = True) -> int:
        """Bytes in one unit of this step."""
        return (1024 if binary else 1000) ** self.value

    @classmethod
    def from_letter(cls, letter: str) -> "UnitStep | None":
        """Step for a format-string letter, case-insensitive; None if it is not a scale letter."""
        letter = letter.upper()
        return scale_letters.get_key(letter) if scale_letters.has_value(letter) else None


scale_letters = BiDirectionalMap({
    UnitStep.KILO: "K", UnitStep.MEGA: "M", UnitStep.GIGA: "G",
    UnitStep.TERA: "T", UnitStep.PETA: "P", UnitStep.EXA: "E",
})

steps_descending = tuple(sorted(scale_letters, reverse=True))


class UnitMatch(NamedTuple):
    """Result of matching a unit suffix at the end of a size string."""
    number: str
    step: UnitStep
    binary: bool
    long: bool


@dataclass(frozen=True)
class UnitTable:
    """
    Immutable table of unit strings used to format and parse sizes.

    Short prefixes ("Ki", "K", "k") are combined with the short connector and byte word
    ("KiB"); long prefixes ("kibi", "kilo") with the long connector and byte word
    ("kibibytes"). Singular byte words are used when the displayed number is exactly 1.

    Attributes:
        short_byte, short_bytes: Short byte word, singular and plural.
        short_connector: Text between a short prefix and the short byte word.
        short_kibi ... short_exbi: Short binary (IEC) prefixes.
        short_kilo: Short prefix for kilo when it means 1024 ("K").
        short_decimal_kilo: Short prefix for kilo when it means 1000 ("k").
        short_mega ... short_exa: Short SI prefixes; their case does not distinguish the base.
        long_byte, long_bytes: Long byte word, singular and plural.
        long_connector: Text between a long prefix and the long byte word.
        long_kibi ... long_exbi, long_kilo ... long_exa: Word-form prefixes.
        case_sensitive: Compare unit strings exactly when parsing; case-insensitive by default.
    """
    short_byte: str = "B"
    short_bytes: str = "B"
    short_connector: str = ""
    short_kibi: str = "Ki"
    short_mebi: str = "Mi"
    short_gibi: str = "Gi"
    short_tebi: str = "Ti"
    short_pebi: str = "Pi"
    short_exbi: str = "Ei"
    short_kilo: str = "K"
    short_decimal_kilo: str = "k"
    short_mega: str = "M"
    short_giga: str = "G"
    short_tera: str = "T"
    short_peta: str = "P"
    short_exa: str = "E"
    long_byte: str = "byte"
    long_bytes: str = "bytes"
    long_connector: str = ""
    long_kibi: str = "kibi"
    long_mebi: str = "mebi"
    long_gibi: str = "gibi"
    long_tebi: str = "tebi"
    long_pebi: str = "pebi"
    long_exbi: str = "exbi"
    long_kilo: str = "kilo"
    long_mega: str = "mega"
    long_giga: str = "giga"
    long_tera: str = "tera"
    long_peta: str = "peta"
    long_exa: str = "exa"
    case_sensitive: bool = False

    def __post_init__(self):
        """Validate that every unit string is a str and every non-connector string is non-empty."""
        for f in fields(self):
            val = getattr(self, f.name)
            if f.name == "case_sensitive":
                if not isinstance(val, bool):
                    raise TypeError(f"UnitTable.case_sensitive must be bool, but got {fmt_type(val)}")
                continue
            if not isinstance(val, str):
                raise TypeError(f"UnitTable.{f.name} must be str, but got {fmt_type(val)}")
            if not val and not f.name.endswith("_connector"):
                raise ValueError(f"UnitTable.{f.name} must be a non-empty string, but got {fmt_value(val)}")

    def merge(self, **overrides) -> Self:
        """
        Create a new UnitTable with the given entries replaced.

        Unspecified entries keep the values of this table.

        Raises:
            TypeError: An override names a field that does not exist.
        """
        names = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - names)
        if unknown:
            raise TypeError(f"unknown UnitTable fields: {', '.join(unknown)}")
        return replace(self, **overrides)

    # ----- Formatting lookups -----

    def prefix(self, step: UnitStep | int, *, iec: bool, long: bool = False, decimal: bool = False) -> str:
        """
        Prefix text for a step.

        With iec the binary prefix is returned ("Ki", "kibi"). Otherwise the SI prefix is
        returned; for short kilo, decimal selects "k" over "K". Step 0 has no prefix.
        """
        step = UnitStep(step)
        if step == UnitStep.BYTE:
            return ""
        name = step.name.lower()
        if iec:
            name = _IEC_NAMES[step]
        elif step == UnitStep.KILO and decimal and not long:
            name = "decimal_kilo"
        return getattr(self, f"{'long' if long else 'short'}_{name}")

    def byte_word(self, *, long: bool = False, singular: bool = False) -> str:
        """Byte word, short or long, singular or plural."""
        if long:
            return self.long_byte if singular else self.long_bytes
        return self.short_byte if singular else self.short_bytes

    def connector(self, *, long: bool = False) -> str:
        return self.long_connector if long else self.short_connector

    def suffix(self, step: UnitStep | int, binary: bool, long: bool = False, *, singular: bool = False) -> str:
        """
        Canonical unit suffix for a step, e.g. "KiB", "kB", "MB", "mebibytes".

        Examples:
            >>> UnitTable().suffix(1, binary=True)
            'KiB'
            >>> UnitTable().suffix(2, binary=False, long=True)
            'megabytes'
        """
        prefix = self.prefix(step, iec=binary, long=long, decimal=not binary)
        word = self.byte_word(long=long, singular=singular)
        if not prefix:
            return word
        return prefix + self.connector(long=long) + word

    # ----- Parsing lookups -----

    def strip_suffix(self, text: str, suffix: str) -> str | None:
        """Return text without a trailing suffix, or None if text does not end with it."""
        if not suffix:
            return text
        tail = text[-len(suffix):] if len(text) >= len(suffix) else None
        if tail is None:
            return None
        if tail == suffix or (not self.case_sensitive and tail.casefold() == suffix.casefold()):
            return text[:-len(suffix)]
        return None

    def match(self, text: str, options: ParseOptions = ParseOptions.DEFAULT) -> UnitMatch | None:
        """
        Match a unit suffix at the end of text.

        Byte words are tried before prefixes, plural before singular and binary prefixes
        before SI ones, so "KiB" never matches as "K". A bare SI prefix is binary unless
        options include USE_IEC_STANDARD. The connector is only consumed when a prefix
        precedes it.

        Returns:
            UnitMatch with the remaining number text, or None when text ends in no known unit.
        """
        value = text.rstrip()
        unit_found = False
        is_long = False

        if allows_long(options):
            unit_found, value = self._strip_first(value, (self.long_bytes, self.long_byte))
            is_long = unit_found
        if not unit_found and allows_short(options):
            unit_found, value = self._strip_first(value, (self.short_bytes, self.short_byte))

        with_connector = value
        if unit_found:
            stripped = self.strip_suffix(value, self.connector(long=is_long))
            value = with_connector if stripped is None else stripped

        use_decimal = bool(options & ParseOptions.USE_IEC_STANDARD)
        candidates = []
        if allows_long(options):
            candidates += [(p, step, iec, True) for p, step, iec in self._prefix_candidates(long=True)]
        if allows_short(options):
            candidates += [(p, step, iec, False) for p, step, iec in self._prefix_candidates(long=False)]

        for prefix, step, iec, long in candidates:
            stripped = self.strip_suffix(value, prefix)
            if stripped is not None:
                return UnitMatch(stripped, step, iec or not use_decimal, long or is_long)

        if not unit_found:
            return None
        return UnitMatch(with_connector, UnitStep.BYTE, True, is_long)

    def _strip_first(self, value: str, suffixes) -> tuple[bool, str]:
        for suffix in suffixes:
            stripped = self.strip_suffix(value, suffix)
            if stripped is not None:
                return True, stripped
        return False, value

    def _prefix_candidates(self, long: bool):
        """(prefix, step, is_iec) in matching order: binary first, then SI."""
        for step in _STEPS:
            yield self.prefix(step, iec=True, long=long), step, True
        for step in _STEPS:
            yield self.prefix(step, iec=False, long=long), step, False
        if not long:
            yield self.short_decimal_kilo, UnitStep.KILO, False


_STEPS = tuple(UnitStep)[1:]

_IEC_NAMES = {
    UnitStep.KILO: "kibi", UnitStep.MEGA: "mebi", UnitStep.GIGA: "gibi",
    UnitStep.TERA: "tebi", UnitStep.PETA: "pebi", UnitStep.EXA: "exbi",
}

INVARIANT_UNITS = UnitTable()
