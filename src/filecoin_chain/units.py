"""
FIL / attoFIL conversion helpers.

All arithmetic goes through ``decimal.Decimal``; balances and gas values
routinely exceed the range where binary floats are exact.
"""

from decimal import ROUND_DOWN, Decimal, InvalidOperation, localcontext
from typing import Union

from filecoin_chain.config import FIL_DECIMALS
from filecoin_chain.exceptions import InvalidInput

Numeric = Union[str, int, float, Decimal]

# Enough digits for 10^18 scaling of any realistic supply figure
DECIMAL_PRECISION = 100


def parse_decimal(value: Numeric, name: str = "value") -> Decimal:
    """Parse a non-negative finite decimal.

    Raises:
        InvalidInput: On booleans, non-numeric strings, NaN/Infinity or
            negative values
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInput(f"{name} must be numeric, got {value!r}")
    try:
        parsed = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError) as e:
        raise InvalidInput(f"{name} is not a number: {value!r}") from e
    if not parsed.is_finite():
        raise InvalidInput(f"{name} must be finite, got {value!r}")
    if parsed < 0:
        raise InvalidInput(f"{name} must not be negative, got {value!r}")
    return parsed


def format_decimal(value: Decimal) -> str:
    """Render a decimal in plain notation without trailing zeros"""
    text = format(value, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"


def to_atto(amount: Numeric, decimals: int = FIL_DECIMALS) -> str:
    """Convert a human amount (e.g. "1.5" FIL) to its smallest unit.

    Digits beyond ``decimals`` fractional places are truncated.
    """
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        scaled = parse_decimal(amount, "amount").scaleb(decimals)
        return format_decimal(scaled.quantize(Decimal(1), rounding=ROUND_DOWN))


def from_atto(value: Numeric, decimals: int = FIL_DECIMALS) -> str:
    """Convert a smallest-unit amount to a human readable string"""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return format_decimal(parse_decimal(value).scaleb(-decimals))
