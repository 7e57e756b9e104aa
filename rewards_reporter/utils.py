from decimal import Decimal, ROUND_HALF_UP, localcontext

from rewards_reporter.models.types import EthereumAddress

# wei balances times a price easily run past the default 28 digits
DECIMAL_PRECISION = 42


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero"""
    with localcontext() as ctx:
        ctx.prec = DECIMAL_PRECISION
        return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def address_sort_key(address: EthereumAddress) -> str:
    """Checksummed addresses have mixed case, so sort on the lowercase form"""
    return address.lower()
