"""
Text round trip of sizes for structured data (JSON, config files, key-value stores).

A size is stored as the scalar string written by to_text() with the default format and
the invariant culture ("1.5 KiB") and read back through parse() with the invariant
culture. Any serializer that writes to_scalar() and reads from_scalar() round-trips every
size exactly.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .culture import INVARIANT
from .errors import FormatError
from .formatters import fmt_type, fmt_value
from .options import ParseOptions, NumberStyle
from .size import SizeBase, BinarySize

log = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

class SizeDecodeError(ValueError):
    """A JSON value could not be decoded as a size; the parse error is chained as __cause__."""


class SizeJSONEncoder(json.JSONEncoder):
    """JSON encoder writing sizes as scalar strings."""

    def default(self, o):
        if isinstance(o, SizeBase):
            return to_scalar(o)
        return super().default(o)


# Methods --------------------------------------------------------------------------------------------------------------

def to_scalar(size: SizeBase) -> str:
    """
    Scalar string for a size.

    Examples:
        >>> to_scalar(BinarySize(1536))
        '1.5 KiB'
    """
    if not isinstance(size, SizeBase):
        raise TypeError(f"expected a size, but got {fmt_type(size)}")
    return size.to_text(culture=INVARIANT)


def from_scalar(cls: type[SizeBase], text: str, options: ParseOptions = ParseOptions.DEFAULT) -> SizeBase:
    """
    Read a scalar string written by to_scalar().

    Raises:
        FormatError: text is not a size string.
        OverflowError: The size does not fit cls.
    """
    return cls.parse(text, options, NumberStyle.NUMBER, INVARIANT)


def size_decoder(
        cls: type[SizeBase] = BinarySize,
        options: ParseOptions = ParseOptions.DEFAULT,
) -> Callable[[Any], SizeBase | None]:
    """
    Build a decoder for one JSON value: a string becomes a size, null becomes None.

    Raises (from the returned function):
        SizeDecodeError: The value is not a string or not a valid size for cls.
    """

    def decode(value: Any) -> SizeBase | None:
        if value is None:
            return None
        if not isinstance(value, str):
            raise SizeDecodeError(f"expected a JSON string for {cls.__name__}, but got {fmt_type(value)}")
        try:
            return from_scalar(cls, value, options)
        except (FormatError, OverflowError) as e:
            log.debug("cannot decode %s from %r: %s", cls.__name__, value, e)
            raise SizeDecodeError(f"invalid {cls.__name__} value: {fmt_value(value)}") from e

    return decode


def dumps(obj: Any, **kwargs) -> str:
    """json.dumps() that writes sizes as scalar strings."""
    kwargs.setdefault("cls", SizeJSONEncoder)
    return json.dumps(obj, **kwargs)


def loads(
        text: str | bytes,
        cls: type[SizeBase] = BinarySize,
        *,
        keys: Iterable[str] = (),
        options: ParseOptions = ParseOptions.DEFAULT,
        **kwargs,
) -> Any:
    """
    json.loads() that decodes sizes.

    Without keys, a top-level array decodes as a list of sizes and any other top-level
    scalar as a single size. With keys, only the values of those keys decode as sizes,
    in objects at any nesting depth, including objects inside arrays.

    Examples:
        >>> loads('"1.5 KiB"')
        BinarySize(value=1536)
        >>> loads('{"limit": "2 MiB", "name": "x"}', keys=["limit"])
        {'limit': BinarySize(value=2097152), 'name': 'x'}

    Raises:
        SizeDecodeError: A size value is invalid.
        json.JSONDecodeError: text is not JSON.
    """
    decode = size_decoder(cls, options)
    keys = frozenset(keys)

    def object_hook(obj: dict) -> dict:
        return {k: decode(v) if k in keys else v for k, v in obj.items()}

    if keys:
        kwargs.setdefault("object_hook", object_hook)
    data = json.loads(text, **kwargs)

    if keys or isinstance(data, dict):
        return data
    if isinstance(data, list):
        return [decode(item) for item in data]
    return decode(data)
