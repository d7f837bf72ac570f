#
# Binsize Aggregates
#

# Standard library -----------------------------------------------------------------------------------------------------
from collections.abc import Callable, Iterable
from typing import Any, TypeVar

# Local ----------------------------------------------------------------------------------------------------------------
from .formatters import fmt_type
from .size import SizeBase, BinarySize, _trunc_div

S = TypeVar("S", bound=SizeBase)


# Methods --------------------------------------------------------------------------------------------------------------

def size_sum(
        items: Iterable[Any],
        selector: Callable[[Any], S | None] | None = None,
        *,
        cls: type[S] | None = None,
) -> S:
    """
    Sum of sizes, skipping None.

    Args:
        items: Sizes, or arbitrary items when selector is given.
        selector: Maps each item to a size or None.
        cls: Result type when no size is present; BinarySize when omitted.

    Returns:
        The checked sum, of the type of the first size found.

    Raises:
        OverflowError: The sum leaves the range of the result type.
        TypeError: An item is not a size, or sizes of different types are mixed.

    Examples:
        >>> size_sum([BinarySize(1024), None, BinarySize(512)])
        BinarySize(value=1536)
        >>> size_sum([])
        BinarySize(value=0)
    """
    total = None
    for size in _selected(items, selector):
        if total is None:
            total = size
        elif type(size) is not type(total):
            raise TypeError(f"cannot sum {fmt_type(total)} with {fmt_type(size)}")
        else:
            total = total + size

    if total is None:
        return (cls or BinarySize).ZERO
    if cls is not None and type(total) is not cls:
        raise TypeError(f"expected {cls.__name__} items, but got {fmt_type(total)}")
    return total


def size_average(
        items: Iterable[Any],
        selector: Callable[[Any], S | None] | None = None,
) -> S | None:
    """
    Mean of sizes, truncated toward zero, skipping None.

    The running total is an unbounded int, so the mean never overflows.

    Returns:
        The mean, of the type of the first size found; None when no size is present.

    Examples:
        >>> size_average([BinarySize(3), BinarySize(4)])
        BinarySize(value=3)
        >>> size_average([None]) is None
        True
    """
    total, count, kind = 0, 0, None
    for size in _selected(items, selector):
        if kind is None:
            kind = type(size)
        elif type(size) is not kind:
            raise TypeError(f"cannot average {kind.__name__} with {fmt_type(size)}")
        total += size.value
        count += 1

    if kind is None:
        return None
    return kind(_trunc_div(total, count))


# Private Methods ------------------------------------------------------------------------------------------------------

def _selected(items: Iterable[Any], selector: Callable[[Any], Any] | None):
    for item in items:
        size = item if selector is None else selector(item)
        if size is None:
            continue
        if not isinstance(size, SizeBase):
            raise TypeError(f"expected a size, but got {fmt_type(size)}")
        yield size
