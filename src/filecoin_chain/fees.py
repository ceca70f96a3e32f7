"""
Filecoin message fee estimation.

Total cost of a message under the Filecoin fee market:

    over_estimation      = gas_limit - gas_used * 1.1
    over_estimation_burn = over_estimation * (gas_limit - gas_used) / gas_used
                           (only when over_estimation > 0, else 0)
    total                = gas_used * base_fee
                           + gas_limit * gas_premium
                           + over_estimation_burn * base_fee

The burn term is the protocol penalty for declaring a gas limit more than
10% above what the message actually uses.
"""

from decimal import ROUND_HALF_UP, Decimal, localcontext

from filecoin_chain.exceptions import InvalidInput
from filecoin_chain.units import DECIMAL_PRECISION, Numeric, format_decimal, parse_decimal

OVER_ESTIMATION_NUM = Decimal(11)
OVER_ESTIMATION_DEN = Decimal(10)

# Fractional digits kept after the burn division
DIVISION_QUANTUM = Decimal(1).scaleb(-20)


def calculate_gas_fee(
    gas_used: Numeric,
    gas_limit: Numeric,
    base_fee: Numeric,
    gas_premium: Numeric,
) -> str:
    """Compute the total fee, in attoFIL, for the given gas figures.

    Args:
        gas_used: Gas the message is expected to consume
        gas_limit: Gas limit declared on the message
        base_fee: Network base fee per gas unit (attoFIL)
        gas_premium: Tip per gas unit (attoFIL)

    Returns:
        Fee as a plain decimal string

    Raises:
        InvalidInput: If any input is negative or not a number, or gas_used is 0
    """
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        ctx.rounding = ROUND_HALF_UP

        used = parse_decimal(gas_used, "gas_used")
        limit = parse_decimal(gas_limit, "gas_limit")
        base = parse_decimal(base_fee, "base_fee")
        premium = parse_decimal(gas_premium, "gas_premium")

        if used == 0:
            raise InvalidInput("gas_used must be greater than zero")

        over_estimation = limit - used * OVER_ESTIMATION_NUM / OVER_ESTIMATION_DEN
        if over_estimation > 0:
            burn = (over_estimation * (limit - used) / used).quantize(DIVISION_QUANTUM)
        else:
            burn = Decimal(0)

        total = used * base + limit * premium + burn * base
        return format_decimal(total)
