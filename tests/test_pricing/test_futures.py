"""Tests for futures CNY -> USD conversion and CNY percent change."""

from decimal import Decimal

from factories import make_history

from lithium_prices.models import FutureContract, HistoryFuture
from lithium_prices.pricing.futures import convert_futures, history_futures_by_contract


def _future(contract: str, price_cny: str, month: str = "Feb-26") -> FutureContract:
    return FutureContract(contract=contract, month=month, price_cny=Decimal(price_cny))


class TestConvertFutures:
    """Tests for convert_futures."""

    def test_converts_to_whole_usd(self) -> None:
        """72500 CNY / 7.25 = 10000 USD."""
        [derived] = convert_futures([_future("LC2602", "72500")], Decimal("7.25"), {})
        assert derived.price == 10000
        assert isinstance(derived.price, int)
        assert derived.price_cny == Decimal("72500")

    def test_usd_price_with_four_place_rate(self) -> None:
        """165080 / 7.2533 = 22759.29... -> 22759."""
        [derived] = convert_futures([_future("LC2602", "165080")], Decimal("7.2533"), {})
        assert derived.price == 22759

    def test_usd_rounds_half_up(self) -> None:
        """72503.625 / 7.25 = 10000.5 -> 10001."""
        [derived] = convert_futures([_future("LC2602", "72503.625")], Decimal("7.25"), {})
        assert derived.price == 10001

    def test_change_computed_on_cny(self) -> None:
        """(165080 - 160000) / 160000 = 3.175% -> 3.18, independent of the rate."""
        history = {"LC2602": Decimal("160000")}
        [at_725] = convert_futures([_future("LC2602", "165080")], Decimal("7.25"), history)
        [at_698] = convert_futures([_future("LC2602", "165080")], Decimal("6.98"), history)
        assert at_725.change == Decimal("3.18")
        assert at_698.change == Decimal("3.18")

    def test_unknown_contract_has_no_change(self) -> None:
        futures = [_future("LC2602", "165080"), _future("LC2603", "165600", "Mar-26")]
        derived = convert_futures(futures, Decimal("7.25"), {"LC2602": Decimal("160000")})
        assert derived[0].change == Decimal("3.18")
        assert derived[1].change is None

    def test_zero_or_missing_baseline_has_no_change(self) -> None:
        futures = [_future("LC2602", "165080"), _future("LC2603", "165600", "Mar-26")]
        derived = convert_futures(
            futures, Decimal("7.25"), {"LC2602": Decimal("0"), "LC2603": None}
        )
        assert [f.change for f in derived] == [None, None]

    def test_output_order_matches_input_order(self) -> None:
        futures = [
            _future("LC2701", "167500", "Jan-27"),
            _future("LC2602", "165080", "Feb-26"),
            _future("LC2609", "168320", "Sep-26"),
        ]
        history = {
            "LC2609": Decimal("168000"),
            "LC2602": Decimal("165000"),
            "LC2701": Decimal("167000"),
        }
        derived = convert_futures(futures, Decimal("7.25"), history)
        assert [f.contract for f in derived] == ["LC2701", "LC2602", "LC2609"]
        assert [f.month for f in derived] == ["Jan-27", "Feb-26", "Sep-26"]

    def test_empty_curve(self) -> None:
        assert convert_futures([], Decimal("7.25"), {}) == ()


class TestHistoryFuturesByContract:
    """Tests for history_futures_by_contract."""

    def test_no_history_is_empty(self) -> None:
        assert history_futures_by_contract(None) == {}

    def test_indexes_by_contract(self) -> None:
        assert history_futures_by_contract(make_history()) == {"LC2602": Decimal("160000")}

    def test_duplicate_contract_last_write_wins(self) -> None:
        history = make_history(
            futures=(
                HistoryFuture(contract="LC2602", price_cny=Decimal("100")),
                HistoryFuture(contract="LC2602", price_cny=Decimal("200")),
            )
        )
        assert history_futures_by_contract(history) == {"LC2602": Decimal("200")}
