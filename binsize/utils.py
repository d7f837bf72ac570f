"""
Binsize utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an object or a class.

    Both `class_name(BinarySize(1))` and `class_name(BinarySize)` return 'BinarySize'.
    Builtin classes are never module-qualified.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns the module-qualified name for non-builtin classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> class_name(int)
        'int'
    """
    cls = obj if isinstance(obj, type) else type(obj)
    name = getattr(cls, "__qualname__", None) or getattr(cls, "__name__", "?")
    module = getattr(cls, "__module__", None)

    if not fully_qualified or module in (None, "builtins"):
        return name
    return f"{module}.{name}"
