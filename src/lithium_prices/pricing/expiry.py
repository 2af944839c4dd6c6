"""GFEX contract expiry checks for the display list.

Contract codes are "LC" + two-digit year + two-digit month ("LC2602" is
February 2026). A contract stays active through its own expiry month.
"""

import re
from collections.abc import Iterable
from datetime import date, datetime, timezone
from typing import Protocol, TypeVar

from lithium_prices.exceptions import InvalidContractCodeError

_CONTRACT_CODE = re.compile(r"^LC(\d{2})(\d{2})$")


class _HasContract(Protocol):
    contract: str


T = TypeVar("T", bound=_HasContract)


def parse_contract_code(code: str) -> tuple[int, int]:
    """Return (year, month) encoded in a contract code."""
    match = _CONTRACT_CODE.match(code)
    if match is None:
        raise InvalidContractCodeError(f"Malformed contract code: {code!r}")
    year = 2000 + int(match.group(1))
    month = int(match.group(2))
    if not 1 <= month <= 12:
        raise InvalidContractCodeError(f"Contract month out of range: {code!r}")
    return year, month


def is_contract_expired(code: str, today: date | None = None) -> bool:
    """True when the contract month lies before the month of ``today``."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    year, month = parse_contract_code(code)
    return (year, month) < (today.year, today.month)


def get_active_contracts(futures: Iterable[T], today: date | None = None) -> list[T]:
    """Drop expired contracts, keeping the relative order of the rest."""
    if today is None:
        today = datetime.now(timezone.utc).date()
    return [future for future in futures if not is_contract_expired(future.contract, today)]
