"""Conversion between camelCase JSON payloads and the price models.

Parsing is the only place numbers enter the system, so it is strict:
every numeric field goes through Decimal(str(value)) and anything that is
not a finite number (booleans, "abc", NaN, Infinity) raises
PriceValidationError naming the offending field. Letting such a value
through would silently corrupt the conversion rate and every figure
derived from it.

Serialization emits Decimals as JSON numbers; integral values become ints.
"""

import json
import os
from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

from lithium_prices.exceptions import InvalidContractCodeError, PriceValidationError
from lithium_prices.models import (
    USD_PER_TONNE,
    DerivedFuture,
    DerivedInstrument,
    DerivedPrices,
    FutureContract,
    HistoryFuture,
    HistoryPrice,
    HistorySnapshot,
    Instrument,
    Snapshot,
)
from lithium_prices.pricing.expiry import parse_contract_code

# ──────────────────────────────────────────────
# Parsing
# ──────────────────────────────────────────────


def _to_decimal(value: Any, field: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, float, str, Decimal)):
        raise PriceValidationError(f"{field}: expected a number, got {value!r}")
    try:
        result = Decimal(str(value).strip())
    except InvalidOperation as e:
        raise PriceValidationError(f"{field}: not a number: {value!r}") from e
    if not result.is_finite():
        raise PriceValidationError(f"{field}: not a finite number: {value!r}")
    return result


def _required_decimal(payload: dict, key: str, path: str) -> Decimal:
    if payload.get(key) is None:
        raise PriceValidationError(f"{path}.{key}: required")
    return _to_decimal(payload[key], f"{path}.{key}")


def _optional_decimal(payload: dict, key: str, path: str) -> Decimal | None:
    value = payload.get(key)
    if value is None:
        return None
    return _to_decimal(value, f"{path}.{key}")


def _required_str(payload: dict, key: str, path: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise PriceValidationError(f"{path}.{key}: expected a non-empty string")
    return value


def _mapping(value: Any, path: str) -> dict:
    if not isinstance(value, dict):
        raise PriceValidationError(f"{path}: expected an object")
    return value


def _list(value: Any, path: str) -> list:
    if value is None:
        return []
    if not isinstance(value, list):
        raise PriceValidationError(f"{path}: expected a list")
    return value


def parse_instrument(payload: Any, path: str) -> Instrument:
    """Parse one spot instrument object."""
    data = _mapping(payload, path)
    spot_only = data.get("spotOnly", False)
    if not isinstance(spot_only, bool):
        raise PriceValidationError(f"{path}.spotOnly: expected a boolean")
    return Instrument(
        id=_required_str(data, "id", path),
        name=_required_str(data, "name", path),
        grade=_required_str(data, "grade", path),
        price=_required_decimal(data, "price", path),
        price_cny=_optional_decimal(data, "priceCNY", path),
        change_usd=_optional_decimal(data, "changeUSD", path),
        change_cny=_optional_decimal(data, "changeCNY", path),
        change_percent=_optional_decimal(data, "changePercent", path),
        unit=data.get("unit") or USD_PER_TONNE,
        spot_only=spot_only,
    )


def parse_snapshot(payload: Any) -> Snapshot:
    """Parse a snapshot payload; futures contract codes must be well-formed and unique."""
    data = _mapping(payload, "snapshot")
    futures: list[FutureContract] = []
    seen: set[str] = set()
    for i, item in enumerate(_list(data.get("futures"), "futures")):
        path = f"futures[{i}]"
        entry = _mapping(item, path)
        future = FutureContract(
            contract=_required_str(entry, "contract", path),
            month=_required_str(entry, "month", path),
            price_cny=_required_decimal(entry, "priceCNY", path),
        )
        try:
            parse_contract_code(future.contract)
        except InvalidContractCodeError as e:
            raise PriceValidationError(f"{path}.contract: {e}") from e
        if future.contract in seen:
            raise PriceValidationError(f"{path}.contract: duplicate {future.contract!r}")
        seen.add(future.contract)
        futures.append(future)

    return Snapshot(
        carbonate=parse_instrument(data.get("carbonate"), "carbonate"),
        spodumene=parse_instrument(data.get("spodumene"), "spodumene"),
        futures=tuple(futures),
    )


def _parse_history_price(payload: Any, path: str) -> HistoryPrice:
    if payload is None:
        return HistoryPrice()
    data = _mapping(payload, path)
    return HistoryPrice(
        price=_optional_decimal(data, "price", path),
        price_cny=_optional_decimal(data, "priceCNY", path),
    )


def parse_history(payload: Any) -> HistorySnapshot | None:
    """Parse a saved baseline. None means no baseline was ever saved."""
    if payload is None:
        return None
    data = _mapping(payload, "history")
    day = _required_str(data, "date", "history")
    try:
        date.fromisoformat(day)
    except ValueError as e:
        raise PriceValidationError(f"history.date: expected YYYY-MM-DD, got {day!r}") from e

    futures = []
    for i, item in enumerate(_list(data.get("futures"), "history.futures")):
        path = f"history.futures[{i}]"
        entry = _mapping(item, path)
        futures.append(
            HistoryFuture(
                contract=_required_str(entry, "contract", path),
                price_cny=_optional_decimal(entry, "priceCNY", path),
            )
        )

    saved_at = data.get("savedAt")
    return HistorySnapshot(
        date=day,
        carbonate=_parse_history_price(data.get("carbonate"), "history.carbonate"),
        spodumene=_parse_history_price(data.get("spodumene"), "history.spodumene"),
        futures=tuple(futures),
        saved_at=saved_at if isinstance(saved_at, str) else None,
    )


# ──────────────────────────────────────────────
# Serialization
# ──────────────────────────────────────────────


def to_json_number(value: Decimal | None) -> int | float | None:
    """Decimal -> JSON number; integral values become ints."""
    if value is None:
        return None
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _instrument_to_dict(inst: Instrument, include_scraped_percent: bool = True) -> dict:
    result: dict[str, Any] = {
        "id": inst.id,
        "name": inst.name,
        "grade": inst.grade,
        "price": to_json_number(inst.price),
    }
    optional = {
        "priceCNY": inst.price_cny,
        "changeUSD": inst.change_usd,
        "changeCNY": inst.change_cny,
    }
    if include_scraped_percent:
        optional["changePercent"] = inst.change_percent
    for key, value in optional.items():
        if value is not None:
            result[key] = to_json_number(value)
    result["unit"] = inst.unit
    if inst.spot_only:
        result["spotOnly"] = True
    return result


def snapshot_to_dict(snapshot: Snapshot) -> dict:
    """Snapshot -> payload accepted by parse_snapshot."""
    return {
        "carbonate": _instrument_to_dict(snapshot.carbonate),
        "spodumene": _instrument_to_dict(snapshot.spodumene),
        "futures": [
            {
                "contract": f.contract,
                "month": f.month,
                "priceCNY": to_json_number(f.price_cny),
            }
            for f in snapshot.futures
        ],
    }


def history_to_dict(history: HistorySnapshot) -> dict:
    """HistorySnapshot -> payload accepted by parse_history."""
    carbonate: dict[str, Any] = {"price": to_json_number(history.carbonate.price)}
    if history.carbonate.price_cny is not None:
        carbonate["priceCNY"] = to_json_number(history.carbonate.price_cny)
    return {
        "date": history.date,
        "savedAt": history.saved_at,
        "carbonate": carbonate,
        "spodumene": {"price": to_json_number(history.spodumene.price)},
        "futures": [
            {"contract": f.contract, "priceCNY": to_json_number(f.price_cny)}
            for f in history.futures
        ],
    }


def derived_instrument_to_dict(derived: DerivedInstrument) -> dict:
    """Instrument fields plus the resolved change and changePercent."""
    result = _instrument_to_dict(derived.instrument, include_scraped_percent=False)
    result["change"] = to_json_number(derived.change)
    result["changePercent"] = to_json_number(derived.change_percent)
    return result


def derived_future_to_dict(future: DerivedFuture) -> dict:
    return {
        "contract": future.contract,
        "month": future.month,
        "priceCNY": to_json_number(future.price_cny),
        "price": future.price,
        "change": to_json_number(future.change),
    }


def derived_prices_to_dict(derived: DerivedPrices) -> dict:
    """DerivedPrices -> the JSON body served at /api/prices."""
    return {
        "carbonate": derived_instrument_to_dict(derived.carbonate),
        "spodumene": derived_instrument_to_dict(derived.spodumene),
        "futures": [derived_future_to_dict(f) for f in derived.futures],
        "conversionRate": to_json_number(derived.conversion_rate),
        "lastUpdated": derived.last_updated,
        "historyDate": derived.history_date,
    }


# ──────────────────────────────────────────────
# Files
# ──────────────────────────────────────────────


def write_json_atomic(path: Path, payload: dict) -> None:
    """Write ``payload`` beside ``path`` and swap it into place.

    Blocking; async callers run it through asyncio.to_thread.
    """
    tmp_path = path.with_suffix(path.suffix + ".tmp")
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
    os.replace(tmp_path, path)
