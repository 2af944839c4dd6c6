"""Price normalization engine.

Provides the conversion-rate, percent-change, change-resolution and futures
conversion primitives, the ``build_response`` composition over them, and the
contract expiry filter used by the display layer.
"""

from lithium_prices.pricing.change import (
    compute_percent_change,
    is_history_usable,
    resolve_instrument_change,
)
from lithium_prices.pricing.conversion import (
    DEFAULT_CONVERSION_RATE,
    compute_conversion_rate,
)
from lithium_prices.pricing.engine import build_response, format_timestamp
from lithium_prices.pricing.expiry import (
    get_active_contracts,
    is_contract_expired,
    parse_contract_code,
)
from lithium_prices.pricing.futures import convert_futures, history_futures_by_contract
from lithium_prices.pricing.rounding import round_half_up, round_to_int

__all__ = [
    "DEFAULT_CONVERSION_RATE",
    "build_response",
    "compute_conversion_rate",
    "compute_percent_change",
    "convert_futures",
    "format_timestamp",
    "get_active_contracts",
    "history_futures_by_contract",
    "is_contract_expired",
    "is_history_usable",
    "parse_contract_code",
    "resolve_instrument_change",
    "round_half_up",
    "round_to_int",
]
