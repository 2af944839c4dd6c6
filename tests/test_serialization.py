"""Tests for payload parsing and JSON serialization."""

import json
from decimal import Decimal

import pytest
from factories import NOW, make_history, make_snapshot

from lithium_prices.exceptions import PriceValidationError
from lithium_prices.pricing import build_response
from lithium_prices.serialization import (
    derived_prices_to_dict,
    history_to_dict,
    parse_history,
    parse_snapshot,
    snapshot_to_dict,
    to_json_number,
)


def _payload() -> dict:
    return {
        "carbonate": {
            "id": "carbonate",
            "name": "LITHIUM CARBONATE",
            "grade": "99.5%",
            "price": 22703.83,
            "priceCNY": 158500,
            "changeCNY": 6000,
            "changeUSD": 859.45,
            "changePercent": 3.93,
            "unit": "USD/T",
        },
        "spodumene": {
            "id": "spodumene",
            "name": "SPODUMENE CONCENTRATE",
            "grade": "6.0%",
            "price": 2035,
            "unit": "USD/T",
            "spotOnly": True,
        },
        "futures": [
            {"contract": "LC2602", "month": "Feb-26", "priceCNY": 165080},
            {"contract": "LC2603", "month": "Mar-26", "priceCNY": 165600},
        ],
    }


class TestParseSnapshot:
    """Tests for parse_snapshot."""

    def test_valid_payload(self) -> None:
        snapshot = parse_snapshot(_payload())
        assert snapshot.carbonate.price == Decimal("22703.83")
        assert snapshot.carbonate.price_cny == Decimal("158500")
        assert snapshot.carbonate.change_usd == Decimal("859.45")
        assert snapshot.carbonate.change_percent == Decimal("3.93")
        assert snapshot.carbonate.spot_only is False
        assert snapshot.spodumene.price_cny is None
        assert snapshot.spodumene.spot_only is True
        assert [f.contract for f in snapshot.futures] == ["LC2602", "LC2603"]

    def test_numeric_strings_accepted(self) -> None:
        payload = _payload()
        payload["spodumene"]["price"] = " 2035.5 "
        assert parse_snapshot(payload).spodumene.price == Decimal("2035.5")

    @pytest.mark.parametrize("bad", ["abc", True, "NaN", float("inf"), [1], {}])
    def test_malformed_price_raises_with_field(self, bad) -> None:
        payload = _payload()
        payload["carbonate"]["price"] = bad
        with pytest.raises(PriceValidationError, match=r"carbonate\.price"):
            parse_snapshot(payload)

    def test_malformed_optional_field_raises(self) -> None:
        payload = _payload()
        payload["carbonate"]["changeCNY"] = "six thousand"
        with pytest.raises(PriceValidationError, match="changeCNY"):
            parse_snapshot(payload)

    def test_missing_price_raises(self) -> None:
        payload = _payload()
        del payload["spodumene"]["price"]
        with pytest.raises(PriceValidationError, match=r"spodumene\.price: required"):
            parse_snapshot(payload)

    def test_malformed_future_price_raises(self) -> None:
        payload = _payload()
        payload["futures"][1]["priceCNY"] = "n/a"
        with pytest.raises(PriceValidationError, match=r"futures\[1\]\.priceCNY"):
            parse_snapshot(payload)

    def test_duplicate_contract_raises(self) -> None:
        payload = _payload()
        payload["futures"].append({"contract": "LC2602", "month": "Feb-26", "priceCNY": 1})
        with pytest.raises(PriceValidationError, match="duplicate"):
            parse_snapshot(payload)

    def test_malformed_contract_code_raises(self) -> None:
        payload = _payload()
        payload["futures"][0]["contract"] = "LC26-02"
        with pytest.raises(PriceValidationError, match=r"futures\[0\]\.contract"):
            parse_snapshot(payload)

    def test_contract_month_out_of_range_raises(self) -> None:
        payload = _payload()
        payload["futures"][1]["contract"] = "LC2613"
        with pytest.raises(PriceValidationError, match=r"futures\[1\]\.contract"):
            parse_snapshot(payload)

    def test_missing_instrument_raises(self) -> None:
        payload = _payload()
        del payload["spodumene"]
        with pytest.raises(PriceValidationError, match="spodumene"):
            parse_snapshot(payload)

    def test_non_boolean_spot_only_raises(self) -> None:
        payload = _payload()
        payload["spodumene"]["spotOnly"] = "yes"
        with pytest.raises(PriceValidationError, match="spotOnly"):
            parse_snapshot(payload)

    def test_snapshot_dict_parses_back(self) -> None:
        snapshot = make_snapshot()
        assert parse_snapshot(snapshot_to_dict(snapshot)) == snapshot


class TestParseHistory:
    """Tests for parse_history."""

    def test_none_means_no_baseline(self) -> None:
        assert parse_history(None) is None

    def test_valid_history(self) -> None:
        history = parse_history(
            {
                "date": "2026-01-21",
                "savedAt": "2026-01-21T08:00:00.000Z",
                "carbonate": {"price": 22000, "priceCNY": 160000},
                "spodumene": {"price": 2000},
                "futures": [{"contract": "LC2602", "priceCNY": 160000}],
            }
        )
        assert history is not None
        assert history.date == "2026-01-21"
        assert history.carbonate.price == Decimal("22000")
        assert history.spodumene.price == Decimal("2000")
        assert history.futures[0].price_cny == Decimal("160000")

    def test_missing_sections_are_empty(self) -> None:
        history = parse_history({"date": "2026-01-21"})
        assert history is not None
        assert history.carbonate.price is None
        assert history.futures == ()

    def test_bad_date_raises(self) -> None:
        with pytest.raises(PriceValidationError, match="history.date"):
            parse_history({"date": "21/01/2026"})

    def test_malformed_baseline_price_raises(self) -> None:
        with pytest.raises(PriceValidationError, match=r"history\.carbonate\.price"):
            parse_history({"date": "2026-01-21", "carbonate": {"price": "x"}})

    def test_history_dict_parses_back(self) -> None:
        history = make_history()
        assert parse_history(history_to_dict(history)) == history


class TestToJsonNumber:
    """Tests for to_json_number."""

    def test_integral_becomes_int(self) -> None:
        assert to_json_number(Decimal("704.00")) == 704
        assert isinstance(to_json_number(Decimal("704.00")), int)

    def test_fraction_becomes_float(self) -> None:
        assert to_json_number(Decimal("3.20")) == 3.2

    def test_none(self) -> None:
        assert to_json_number(None) is None


class TestDerivedPricesToDict:
    """The /api/prices body."""

    def test_top_level_fields(self) -> None:
        body = derived_prices_to_dict(build_response(make_snapshot(), make_history(), now=NOW))
        assert set(body) == {
            "carbonate",
            "spodumene",
            "futures",
            "conversionRate",
            "lastUpdated",
            "historyDate",
        }
        assert body["conversionRate"] == 7.2542
        assert body["lastUpdated"] == "2026-01-22T08:00:00.000Z"
        assert body["historyDate"] == "2026-01-21"

    def test_instrument_fields(self) -> None:
        body = derived_prices_to_dict(build_response(make_snapshot(), make_history(), now=NOW))
        assert body["carbonate"] == {
            "id": "carbonate",
            "name": "LITHIUM CARBONATE",
            "grade": "99.5%",
            "price": 22704,
            "priceCNY": 164700,
            "unit": "USD/T",
            "change": 704,
            "changePercent": 3.2,
        }
        assert body["spodumene"]["spotOnly"] is True
        assert "priceCNY" not in body["spodumene"]

    def test_futures_fields(self) -> None:
        body = derived_prices_to_dict(build_response(make_snapshot(), make_history(), now=NOW))
        assert body["futures"] == [
            {"contract": "LC2602", "month": "Feb-26", "priceCNY": 165080, "price": 22756, "change": 3.18},
            {"contract": "LC2603", "month": "Mar-26", "priceCNY": 165600, "price": 22828, "change": None},
        ]

    def test_explicit_nulls_without_history(self) -> None:
        body = derived_prices_to_dict(build_response(make_snapshot(), None, now=NOW))
        assert body["carbonate"]["change"] is None
        assert body["carbonate"]["changePercent"] is None
        assert body["historyDate"] is None

    def test_json_serializable(self) -> None:
        body = derived_prices_to_dict(build_response(make_snapshot(), make_history(), now=NOW))
        assert json.loads(json.dumps(body)) == body
