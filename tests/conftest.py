#
# Pytest Fixtures
#

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from binsize.culture import Culture
from binsize.units import UnitTable


# Fixtures -------------------------------------------------------------------------------------------------------------

@pytest.fixture
def nl_culture() -> Culture:
    """Dutch number symbols: decimal comma, dot grouping."""
    return Culture.get("nl-NL")


@pytest.fixture
def custom_units() -> UnitTable:
    """Unit table with non-default prefix, byte and connector strings."""
    return UnitTable(
        short_byte="C",
        short_bytes="Cs",
        short_connector="-",
        short_kibi="Lj",
        short_kilo="L",
        short_decimal_kilo="l",
    )
