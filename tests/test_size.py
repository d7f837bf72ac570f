#
# Binsize - Size Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import operator
from collections import UserList
from dataclasses import FrozenInstanceError
from decimal import Decimal
from fractions import Fraction

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from binsize.errors import FormatError
from binsize.options import NumberStyle, ParseOptions
from binsize.size import BinarySize, UBinarySize, IecBinarySize, UIecBinarySize, SIZE_TYPES

BIG = 123456789012345678


# Tests ----------------------------------------------------------------------------------------------------------------

class TestConstruction:
    def test_default(self):
        assert BinarySize().value == 0
        assert BinarySize() == BinarySize.ZERO

    @pytest.mark.parametrize(
        "cls, lo, hi",
        [
            pytest.param(BinarySize, -2 ** 63, 2 ** 63 - 1, id="signed"),
            pytest.param(UBinarySize, 0, 2 ** 64 - 1, id="unsigned"),
            pytest.param(IecBinarySize, -2 ** 63, 2 ** 63 - 1, id="iec-signed"),
            pytest.param(UIecBinarySize, 0, 2 ** 64 - 1, id="iec-unsigned"),
        ],
    )
    def test_constants(self, cls, lo, hi):
        assert cls.MIN_VALUE.value == lo
        assert cls.MAX_VALUE.value == hi
        assert cls.ZERO.value == 0
        assert type(cls.ZERO) is cls

    @pytest.mark.parametrize(
        "cls, value",
        [
            pytest.param(BinarySize, 2 ** 63, id="signed-above-max"),
            pytest.param(BinarySize, -2 ** 63 - 1, id="signed-below-min"),
            pytest.param(UBinarySize, -1, id="unsigned-negative"),
            pytest.param(UBinarySize, 2 ** 64, id="unsigned-above-max"),
        ],
    )
    def test_out_of_range(self, cls, value):
        with pytest.raises(OverflowError, match="out of range"):
            cls(value)

    @pytest.mark.parametrize(
        "value",
        [
            pytest.param(True, id="bool"),
            pytest.param(1.5, id="float"),
            pytest.param("1024", id="str"),
            pytest.param(None, id="none"),
        ],
    )
    def test_non_int(self, value):
        with pytest.raises(TypeError, match="value must be an int"):
            BinarySize(value)

    def test_index_type(self):
        """Objects with __index__ are accepted and stored as int."""
        size = BinarySize(UBinarySize(12))
        assert size.value == 12
        assert type(size.value) is int

    def test_immutable(self):
        size = BinarySize(1)
        with pytest.raises(FrozenInstanceError):
            size.value = 2

    def test_repr(self):
        assert repr(BinarySize(1024)) == "BinarySize(value=1024)"
        assert repr(UIecBinarySize(1)) == "UIecBinarySize(value=1)"


class TestScaled:
    @pytest.mark.parametrize(
        "method, value, expected",
        [
            pytest.param("from_kibi", 1.5, 1536, id="kibi-float"),
            pytest.param("from_mebi", 2, 2 * 1024 ** 2, id="mebi-int"),
            pytest.param("from_gibi", Decimal("0.5"), 512 * 1024 ** 2, id="gibi-decimal"),
            pytest.param("from_tebi", Fraction(1, 4), 256 * 1024 ** 3, id="tebi-fraction"),
            pytest.param("from_pebi", 1, 1024 ** 5, id="pebi"),
            pytest.param("from_exbi", 7, 7 * 1024 ** 6, id="exbi"),
            pytest.param("from_kibi", 0.0009765625, 1, id="one-byte"),
            pytest.param("from_kibi", 0.0005, 0, id="truncated"),
            pytest.param("from_kibi", -1.9990234375, -2047, id="truncated-negative"),
        ],
    )
    def test_from(self, method, value, expected):
        assert getattr(BinarySize, method)(value).value == expected

    @pytest.mark.parametrize(
        "value, exc",
        [
            pytest.param(float("nan"), ValueError, id="nan"),
            pytest.param(float("inf"), OverflowError, id="inf"),
            pytest.param(8, OverflowError, id="out-of-range"),
            pytest.param(True, TypeError, id="bool"),
            pytest.param("1", TypeError, id="str"),
        ],
    )
    def test_from_invalid(self, value, exc):
        with pytest.raises(exc):
            BinarySize.from_exbi(value)

    def test_unsigned_range(self):
        assert UBinarySize.from_exbi(15).value == 15 * 2 ** 60
        with pytest.raises(OverflowError):
            UBinarySize.from_kibi(-1)

    @pytest.mark.parametrize(
        "prop, expected",
        [
            pytest.param("as_kibi", 1536.0, id="kibi"),
            pytest.param("as_mebi", 1.5, id="mebi"),
            pytest.param("as_gibi", 1.5 / 1024, id="gibi"),
            pytest.param("as_tebi", 1.5 / 1024 ** 2, id="tebi"),
            pytest.param("as_pebi", 1.5 / 1024 ** 3, id="pebi"),
            pytest.param("as_exbi", 1.5 / 1024 ** 4, id="exbi"),
        ],
    )
    def test_as(self, prop, expected):
        assert getattr(BinarySize.from_mebi(1.5), prop) == pytest.approx(expected)


class TestParse:
    @pytest.mark.parametrize(
        "cls, text, expected",
        [
            pytest.param(BinarySize, "123KiB", 123 * 1024, id="iec"),
            pytest.param(BinarySize, "123KB", 123 * 1024, id="si-binary-default"),
            pytest.param(IecBinarySize, "123KB", 123000, id="iec-type-decimal"),
            pytest.param(IecBinarySize, "123KiB", 123 * 1024, id="iec-type-iec"),
            pytest.param(UIecBinarySize, "1 MB", 1000000, id="iec-unsigned"),
            pytest.param(BinarySize, "5.5EiB", 6341068275337658368, id="exbi"),
            pytest.param(BinarySize, "0.5B", 0, id="truncate-fraction"),
            pytest.param(BinarySize, "-0.9B", 0, id="truncate-negative-fraction"),
            pytest.param(BinarySize, "1.0009765625KiB", 1025, id="fractional-kibi"),
            pytest.param(BinarySize, "", 0, id="empty"),
            pytest.param(UBinarySize, "16EiB", None, id="unsigned-max-overflow"),
        ],
    )
    def test_parse(self, cls, text, expected):
        if expected is None:
            with pytest.raises(OverflowError):
                cls.parse(text)
        else:
            assert cls.parse(text) == cls(expected)

    def test_parse_iec_option(self):
        assert BinarySize.parse("5.5E", ParseOptions.USE_IEC_STANDARD).value == 5500000000000000000

    @pytest.mark.parametrize(
        "cls, text",
        [
            pytest.param(BinarySize, "1234EB", id="scaled-overflow"),
            pytest.param(BinarySize, "8EiB", id="max-plus-one"),
            pytest.param(UBinarySize, "-1", id="negative-unsigned"),
            pytest.param(UBinarySize, "-1KB", id="negative-unsigned-scaled"),
        ],
    )
    def test_overflow(self, cls, text):
        with pytest.raises(OverflowError):
            cls.parse(text)

    def test_extremes(self):
        assert BinarySize.parse("-8EiB") == BinarySize.MIN_VALUE
        assert UBinarySize.parse("18446744073709551615") == UBinarySize.MAX_VALUE

    def test_exponent_out_of_range(self):
        with pytest.raises(OverflowError):
            BinarySize.parse("1e1000000 KB", style=NumberStyle.FLOAT)
        assert BinarySize.try_parse("1e1000000", style=NumberStyle.FLOAT) == (False, BinarySize.ZERO)

    def test_format_error(self):
        with pytest.raises(FormatError):
            BinarySize.parse("12 XB")

    def test_none(self):
        with pytest.raises(TypeError):
            BinarySize.parse(None)

    @pytest.mark.parametrize(
        "text, expected",
        [
            pytest.param("123KB", (True, BinarySize(125952)), id="valid"),
            pytest.param("bad", (False, BinarySize.ZERO), id="format-error"),
            pytest.param("1234EB", (False, BinarySize.ZERO), id="overflow"),
            pytest.param(None, (False, BinarySize.ZERO), id="none"),
        ],
    )
    def test_try_parse(self, text, expected):
        assert BinarySize.try_parse(text) == expected


class TestFormat:
    def test_str(self):
        assert str(BinarySize(126464)) == "123.5 KiB"
        assert str(UBinarySize(0)) == "0 B"

    def test_to_text(self):
        assert BinarySize(BIG).to_text("0.# PB") == "109.7 PB"
        assert UBinarySize(BIG).to_text("0.# Sbyte") == "109.7 petabytes"

    def test_to_text_long_pattern(self):
        assert BinarySize(1536).to_text("0." + "#" * 250 + " KiB") == "1.5 KiB"

    def test_to_text_culture(self, nl_culture):
        assert BinarySize(BIG).to_text("0.#PB", nl_culture) == "109,7PB"

    def test_format_protocol(self):
        size = BinarySize(BIG)
        assert f"{size:0.# SB}" == "109.7 PB"
        assert f"{size}" == str(size)
        assert format(BinarySize(1536), "KiB") == "1.5KiB"

    def test_try_format_into_list(self):
        buffer = [""] * 12
        assert BinarySize(1536).try_format_into(buffer) == (True, 7)
        assert "".join(buffer[:7]) == "1.5 KiB"

    def test_try_format_into_sequence(self):
        """Any mutable sequence of characters works as a buffer."""
        buffer = UserList(" " * 6)
        assert BinarySize(1536).try_format_into(buffer, "KiB") == (True, 6)
        assert "".join(buffer) == "1.5KiB"
        assert BinarySize(1536).try_format_into(UserList(" " * 3), "KiB") == (False, 0)

    @pytest.mark.parametrize("cls", SIZE_TYPES)
    @pytest.mark.parametrize("value", [0, 1, 1023, 126464, BIG, 2 ** 63 - 1])
    def test_round_trip(self, cls, value):
        size = cls(value)
        assert cls.parse(str(size)) == size


class TestConversions:
    def test_int(self):
        assert int(BinarySize(-5)) == -5
        assert operator.index(UBinarySize(5)) == 5
        assert [0, 1, 2][BinarySize(1)] == 1

    def test_float(self):
        assert float(BinarySize(1536)) == 1536.0

    def test_bool(self):
        assert not BinarySize.ZERO
        assert BinarySize(-1)


class TestComparison:
    def test_equality(self):
        assert BinarySize(1024) == BinarySize(1024)
        assert BinarySize(1024) != BinarySize(1025)

    def test_different_types(self):
        """Sizes of different types are never equal."""
        assert BinarySize(1) != UBinarySize(1)
        assert BinarySize(1) != IecBinarySize(1)
        assert BinarySize(1) != 1

    def test_ordering(self):
        assert BinarySize(-1) < BinarySize(0) < BinarySize(1)
        assert max(UBinarySize(3), UBinarySize(7)) == UBinarySize(7)
        assert sorted([BinarySize(3), BinarySize(-2)]) == [BinarySize(-2), BinarySize(3)]

    def test_ordering_different_types(self):
        with pytest.raises(TypeError):
            BinarySize(1) < UBinarySize(2)

    def test_hash(self):
        assert hash(BinarySize(1024)) == hash(BinarySize(1024))
        assert len({BinarySize(1), BinarySize(1), BinarySize(2)}) == 2


class TestArithmetic:
    def test_add(self):
        assert BinarySize(1024) + BinarySize(512) == BinarySize(1536)
        assert BinarySize(1024) + 1 == BinarySize(1025)
        assert 1 + BinarySize(1024) == BinarySize(1025)

    def test_add_overflow(self):
        with pytest.raises(OverflowError, match="arithmetic overflow"):
            BinarySize.MAX_VALUE + BinarySize.MAX_VALUE

    def test_sub(self):
        assert BinarySize(5) - BinarySize(7) == BinarySize(-2)
        assert 10 - BinarySize(3) == BinarySize(7)
        with pytest.raises(OverflowError):
            UBinarySize(5) - UBinarySize(7)

    def test_mul(self):
        assert BinarySize(1024) * 3 == BinarySize(3072)
        assert 3 * BinarySize(1024) == BinarySize(3072)
        with pytest.raises(OverflowError):
            BinarySize.from_exbi(4) * 2

    @pytest.mark.parametrize(
        "a, b, quotient, remainder",
        [
            pytest.param(7, 2, 3, 1, id="positive"),
            pytest.param(-7, 2, -3, -1, id="negative-dividend"),
            pytest.param(7, -2, -3, 1, id="negative-divisor"),
            pytest.param(-7, -2, 3, -1, id="both-negative"),
        ],
    )
    def test_div_mod(self, a, b, quotient, remainder):
        """Division truncates toward zero; the remainder takes the dividend's sign."""
        assert BinarySize(a) / BinarySize(b) == BinarySize(quotient)
        assert BinarySize(a) % BinarySize(b) == BinarySize(remainder)

    def test_div_zero(self):
        with pytest.raises(ZeroDivisionError):
            BinarySize(1) / 0

    def test_div_overflow(self):
        with pytest.raises(OverflowError):
            BinarySize.MIN_VALUE / -1
        assert BinarySize.MIN_VALUE % -1 == BinarySize.ZERO

    def test_unary(self):
        assert -BinarySize(5) == BinarySize(-5)
        assert +BinarySize(5) == BinarySize(5)
        assert abs(BinarySize(-5)) == BinarySize(5)
        with pytest.raises(OverflowError):
            -BinarySize.MIN_VALUE
        with pytest.raises(OverflowError):
            abs(BinarySize.MIN_VALUE)
        with pytest.raises(OverflowError):
            -UBinarySize(1)

    def test_bitwise(self):
        assert BinarySize(0b1100) & BinarySize(0b1010) == BinarySize(0b1000)
        assert BinarySize(0b1100) | 0b0011 == BinarySize(0b1111)
        assert BinarySize(0b1100) ^ BinarySize(0b0110) == BinarySize(0b1010)
        assert ~BinarySize(0) == BinarySize(-1)
        assert ~UBinarySize(0) == UBinarySize.MAX_VALUE

    def test_shifts(self):
        assert BinarySize(1) << 10 == BinarySize(1024)
        assert BinarySize(1) << 64 == BinarySize(1)
        assert BinarySize(1) << 63 == BinarySize.MIN_VALUE
        assert BinarySize(-8) >> 1 == BinarySize(-4)
        assert UBinarySize(1) << 63 == UBinarySize(2 ** 63)

    def test_result_type(self):
        """Arithmetic keeps the left operand's type."""
        assert type(IecBinarySize(1) + BinarySize(1)) is IecBinarySize
        assert type(UIecBinarySize(1) * 2) is UIecBinarySize

    @pytest.mark.parametrize(
        "op",
        [
            pytest.param(operator.add, id="add"),
            pytest.param(operator.sub, id="sub"),
            pytest.param(operator.mul, id="mul"),
            pytest.param(operator.and_, id="and"),
        ],
    )
    def test_mixed_signedness(self, op):
        with pytest.raises(TypeError):
            op(BinarySize(1), UBinarySize(1))

    @pytest.mark.parametrize(
        "other",
        [
            pytest.param(1.5, id="float"),
            pytest.param(True, id="bool"),
            pytest.param("1", id="str"),
        ],
    )
    def test_unsupported_operand(self, other):
        with pytest.raises(TypeError):
            BinarySize(1) + other
