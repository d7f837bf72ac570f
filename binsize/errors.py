"""
Binsize exceptions.

Range violations use the builtin OverflowError; only grammar failures get a dedicated type.
"""


class FormatError(ValueError):
    """
    Text or format string does not match the size grammar.

    Raised for a malformed number, an unrecognized unit suffix, a short unit where only long
    units are allowed, stray characters, or an unsupported numeric pattern.
    """
