"""
Normalize numeric inputs for byte-count arithmetic.

Scaled constructors and converters accept Python numbers, Decimal, Fraction and
third-party scalars (NumPy and similar). This module turns any of them into an exact
int or Decimal so scaling never loses precision before truncation.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import math
import operator
from decimal import Decimal, Context
from fractions import Fraction

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type, fmt_value

_EXACT = Context(prec=200)


# Methods --------------------------------------------------------------------------------------------------------------

def std_magnitude(value, *, allow_bool: bool = False) -> int | Decimal:
    """
    Convert a real number to an exact int or Decimal.

    Parameters
    ----------
    value : int, float, Decimal, Fraction, or a scalar with __index__/.item()/__float__
        Number to convert.
    allow_bool : bool, default False
        If True, convert bool to int. If False, bool raises TypeError, since bool is a
        subclass of int and is almost always a bug here.

    Returns
    -------
    int
        For int and __index__ types (NumPy integers).
    Decimal
        For float, Decimal and Fraction values, holding the exact value of the input
        (Fractions with non-terminating expansions are rounded to 200 digits).

    Raises
    ------
    TypeError
        For bool (unless allowed), str and other non-numeric types.
    ValueError
        For NaN.
    OverflowError
        For infinities.

    Examples
    --------
    >>> std_magnitude(1.5)
    Decimal('1.5')
    >>> std_magnitude(Fraction(1, 4))
    Decimal('0.25')
    """
    if isinstance(value, bool):
        if allow_bool:
            return int(value)
        raise TypeError(f"boolean values not supported, got {value}")

    if isinstance(value, int):
        return value

    if isinstance(value, (str, bytes, bytearray)):
        raise TypeError(f"unsupported numeric type: {fmt_type(value)}")

    # NumPy integers and other true integer types
    if hasattr(value, "__index__"):
        return operator.index(value)

    # Array scalars
    if not isinstance(value, (float, Decimal, Fraction)) and callable(getattr(value, "item", None)):
        return std_magnitude(value.item(), allow_bool=allow_bool)

    if isinstance(value, Fraction):
        return _EXACT.divide(Decimal(value.numerator), Decimal(value.denominator))

    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, float) or hasattr(value, "__float__"):
        as_float = float(value)
        if math.isnan(as_float):
            raise ValueError(f"cannot convert NaN to a byte count: {fmt_value(value)}")
        result = Decimal(as_float)
    else:
        raise TypeError(f"unsupported numeric type: {fmt_type(value)}")

    if result.is_nan():
        raise ValueError(f"cannot convert NaN to a byte count: {fmt_value(value)}")
    if result.is_infinite():
        raise OverflowError(f"cannot convert infinity to a byte count: {fmt_value(value)}")
    return result


def truncate_to_int(value: int | Decimal, lo: int, hi: int, type_name: str = "size") -> int:
    """
    Truncate toward zero and check the result is in [lo, hi].

    The range check happens before the integer conversion, so huge exponents
    (Decimal("1e999999")) fail fast instead of materializing a huge int.

    Raises:
        OverflowError: The truncated value is outside [lo, hi].
    """
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise OverflowError(f"value is not finite: {fmt_value(value)}")
        if value <= lo - 1 or value >= hi + 1:
            raise OverflowError(f"value {value} is out of range for {type_name} [{lo}, {hi}]")
        value = int(value)  # truncates toward zero
    if value < lo or value > hi:
        raise OverflowError(f"value {value} is out of range for {type_name} [{lo}, {hi}]")
    return value
