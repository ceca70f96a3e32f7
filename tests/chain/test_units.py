import pytest

from filecoin_chain.exceptions import InvalidInput
from filecoin_chain.units import format_decimal, from_atto, parse_decimal, to_atto


def test_to_atto():
    assert to_atto("1") == "1000000000000000000"
    assert to_atto("1.5") == "1500000000000000000"
    assert to_atto(0) == "0"
    assert to_atto("0.000000000000000001") == "1"


def test_to_atto_truncates_extra_precision():
    assert to_atto("0.0000000000000000019") == "1"


def test_to_atto_float_goes_through_str():
    assert to_atto(0.1) == "100000000000000000"


def test_from_atto():
    assert from_atto("1500000000000000000") == "1.5"
    assert from_atto("210000000") == "0.00000000021"
    assert from_atto("0") == "0"
    assert from_atto(10**24) == "1000000"


@pytest.mark.parametrize("bad", ["-1", "one", "", None])
def test_rejects_invalid_amounts(bad):
    with pytest.raises(InvalidInput):
        to_atto(bad)


def test_format_decimal_has_no_exponent():
    assert format_decimal(parse_decimal("2.1E+8")) == "210000000"
    assert format_decimal(parse_decimal("1E-20")) == "0.00000000000000000001"
    assert format_decimal(parse_decimal("100")) == "100"
