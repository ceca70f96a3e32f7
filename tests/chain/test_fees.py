"""
Tests for the Filecoin fee formula.
"""

from decimal import Decimal

import pytest

from filecoin_chain.exceptions import InvalidInput
from filecoin_chain.fees import calculate_gas_fee


def test_overestimated_limit_pays_burn():
    # over = 2000000 - 1100000 = 900000, burn = 900000 * 1000000 / 1000000
    fee = calculate_gas_fee("1000000", "2000000", "100", "10")
    assert fee == "210000000"


def test_limit_within_tolerance_has_no_burn():
    # 1050000 < 1000000 * 1.1, so only base fee and premium are charged
    fee = calculate_gas_fee("1000000", "1050000", "100", "10")
    assert fee == str(1000000 * 100 + 1050000 * 10)


def test_limit_exactly_at_tolerance_has_no_burn():
    fee = calculate_gas_fee("1000000", "1100000", "100", "0")
    assert fee == "100000000"


def test_same_inputs_same_result():
    args = ("1234567", "2500000", "987654321", "123456")
    assert calculate_gas_fee(*args) == calculate_gas_fee(*args)


def test_accepts_ints_and_decimals():
    assert calculate_gas_fee(1000000, 2000000, 100, 10) == "210000000"
    assert calculate_gas_fee(Decimal(1000000), "2000000", Decimal("100"), 10) == "210000000"


def test_values_beyond_64_bit_keep_precision():
    base_fee = str(2**70)
    fee = calculate_gas_fee("1", "1", base_fee, "0")
    assert fee == base_fee


def test_burn_division_keeps_fraction():
    # over = 10 - 3.3 = 6.7, burn = 6.7 * 7 / 3 = 15.6333...
    fee = calculate_gas_fee("3", "10", "3", "0")
    assert Decimal(fee) == Decimal("9") + Decimal("15.63333333333333333333") * 3
    assert "e" not in fee.lower()


@pytest.mark.parametrize("gas_used", ["0", 0, "0.0"])
def test_zero_gas_used_is_invalid(gas_used):
    with pytest.raises(InvalidInput):
        calculate_gas_fee(gas_used, "2000000", "100", "10")


@pytest.mark.parametrize(
    "args",
    [
        ("-1", "2000000", "100", "10"),
        ("1000000", "-2000000", "100", "10"),
        ("1000000", "2000000", "-100", "10"),
        ("1000000", "2000000", "100", "-10"),
    ],
)
def test_negative_inputs_are_invalid(args):
    with pytest.raises(InvalidInput):
        calculate_gas_fee(*args)


@pytest.mark.parametrize("bad", ["abc", "", "NaN", "Infinity", None, True])
def test_non_numeric_inputs_are_invalid(bad):
    with pytest.raises(InvalidInput):
        calculate_gas_fee("1000000", bad, "100", "10")
