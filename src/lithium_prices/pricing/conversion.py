"""CNY/USD conversion rate implied by the spot carbonate price pair.

SMM quotes carbonate in both currencies, so the ratio of the two is the rate
the market data itself uses. No FX feed is consulted.

CRITICAL: All values use Decimal. Never use float for prices or rates.
"""

from decimal import Decimal

from lithium_prices.models import Instrument

DEFAULT_CONVERSION_RATE = Decimal("6.98")


def compute_conversion_rate(
    carbonate: Instrument, fallback: Decimal = DEFAULT_CONVERSION_RATE
) -> Decimal:
    """Compute CNY per USD from the carbonate spot quote.

    Formula: price_cny / price

    Args:
        carbonate: Carbonate spot instrument carrying USD and CNY prices.
        fallback: Rate to use when the pair cannot imply one.

    Returns:
        The implied rate at full precision, or ``fallback`` when either price
        is missing or zero. Never raises.
    """
    if not carbonate.price or not carbonate.price_cny:
        return fallback
    return carbonate.price_cny / carbonate.price
