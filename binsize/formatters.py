"""
Formatting helpers for exception and log messages.

Values are rendered as short type-value tokens, robust against broken __repr__ and
very long inputs, so a bad argument is always reported legibly.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Literal

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name

PRIMITIVE_TYPES = (
    type(None),
    bool,  # Comes before int (is subclass of int)
    int,
    float,
    str,
)

# Classes --------------------------------------------------------------------------------------------------------------

Style = Literal["ascii", "equal", "unicode-angle"]


# Methods --------------------------------------------------------------------------------------------------------------


def fmt_type(obj: Any, *, style: Style = "ascii", fully_qualified: bool = False) -> str:
    """Format the type of an object (or a type itself) for error messages.

    Examples:
        >>> fmt_type(42)
        '<int>'
        >>> fmt_type("KiB", style="unicode-angle")
        '⟨str⟩'
    """
    return _fmt_type_value(class_name(obj, fully_qualified=fully_qualified), style=style)


def fmt_value(obj: Any, *, style: Style = "ascii", max_repr: int = 80, label_primitives: bool = False) -> str:
    """
    Format a single value as a type-value pair for error messages.

    Primitives are shown by repr only, unless label_primitives is set. Long reprs are
    truncated to max_repr characters with an ellipsis appended.

    Examples:
        >>> fmt_value("12 XB")
        "'12 XB'"
        >>> fmt_value(3.5, label_primitives=True)
        '<float: 3.5>'
        >>> fmt_value(b"KiB")
        "<bytes: b'KiB'>"
    """
    repr_ = _safe_repr(obj)
    if style == "ascii":
        repr_ = repr_.replace(">", "\\>")
    repr_ = _fmt_truncate(repr_, max_repr, ellipsis="..." if style == "ascii" else "…")

    if type(obj) in PRIMITIVE_TYPES and not label_primitives:
        return repr_
    return _fmt_type_value(class_name(obj), repr_, style=style)


# Private Methods ------------------------------------------------------------------------------------------------------


def _fmt_truncate(repr_: str, max_len: int, ellipsis: str = "…") -> str:
    """Truncate to max_len visible characters; quoted reprs keep their closing quote."""
    if max_len <= 0:
        return ""
    if len(repr_) <= max_len:
        return repr_

    if len(repr_) >= 2 and repr_[0] in ("'", '"') and repr_[-1] == repr_[0]:
        quote = repr_[0]
        return f"{quote}{repr_[1:1 + max_len]}{ellipsis}{quote}"
    return repr_[:max_len] + ellipsis


def _fmt_type_value(type_name: str, value_repr: str | None = None, *, style: Style = "ascii") -> str:
    """Combine a type name and a repr into a single display token according to style."""
    if style == "unicode-angle":
        return f"⟨{type_name}⟩" if value_repr is None else f"⟨{type_name}: {value_repr}⟩"
    if style == "equal":
        return f"{type_name}" if value_repr is None else f"{type_name}={value_repr}"
    return f"<{type_name}>" if value_repr is None else f"<{type_name}: {value_repr}>"


def _safe_repr(obj) -> str:
    """repr() that survives a broken __repr__."""
    try:
        return repr(obj)
    except Exception as e:
        return f"<{class_name(obj)} object (repr failed: {type(e).__name__})>"
