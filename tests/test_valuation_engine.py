from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from lp_watcher.application.use_cases.value_event import TokenAmount, ValuationEngine
from lp_watcher.domain.entities.events import (
    AddLiquidityEvent,
    RemoveLiquidityImbalanceEvent,
    RemoveLiquidityOneEvent,
    SwapEvent,
)
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.exceptions import InvalidPrecisionError, PriceUnauthorizedDomainError
from lp_watcher.domain.services.valuation import format_usd, is_rate_anomalous


NOW = datetime(2026, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakeTokenPricePort:
    def __init__(self, prices: dict[str, Decimal], *, error: Exception | None = None):
        self._prices = prices
        self._error = error
        self.calls: list[list[str]] = []

    def get_prices_usd(self, *, price_ids: list[str]) -> dict[str, Decimal]:
        self.calls.append(list(price_ids))
        if self._error is not None:
            raise self._error
        return {price_id: self._prices[price_id] for price_id in price_ids}


def _stable_pool() -> PoolConfig:
    return PoolConfig(
        name="USD Pool",
        production_address="0xpool",
        local_address="0xlocal",
        tokens=("USDC", "USDT"),
        decimals=(6, 6),
        price_ids=("usd-coin", "tether"),
    )


def _swap(sold: int, bought: int) -> SwapEvent:
    return SwapEvent(
        pool_name="USD Pool",
        actor="0xbuyer",
        transaction_hash="0xtx",
        timestamp=NOW,
        tokens_sold=sold,
        tokens_bought=bought,
        sold_id=0,
        bought_id=1,
    )


def _engine(prices: dict[str, Decimal] | None = None) -> tuple[ValuationEngine, FakeTokenPricePort]:
    port = FakeTokenPricePort(prices or {"usd-coin": Decimal("1.00"), "tether": Decimal("1.00")})
    return ValuationEngine(price_port=port), port


def test_swap_at_normal_rate_is_not_flagged():
    engine, port = _engine()

    result = engine.execute(_swap(100_000_000, 99_000_000), _stable_pool())

    sold, bought = result.tokens
    assert (sold.human_amount, bought.human_amount) == ("100.0000", "99.0000")
    assert (format_usd(sold.usd_value), format_usd(bought.usd_value)) == ("$100.00", "$99.00")
    assert result.exchange_rate == Decimal("0.99")
    assert result.is_anomalous is False
    assert port.calls == [["usd-coin", "tether"]]


def test_swap_below_threshold_is_flagged():
    engine, _ = _engine()

    result = engine.execute(_swap(1_000_000, 960_000), _stable_pool())

    assert result.exchange_rate == Decimal("0.96")
    assert result.is_anomalous is True


def test_anomaly_threshold_boundary():
    assert is_rate_anomalous(Decimal("0.97")) is True
    assert is_rate_anomalous(Decimal("0.9700001")) is False
    assert is_rate_anomalous(None) is False


def test_swap_rate_uses_displayed_amounts():
    engine, _ = _engine()

    just_above = engine.value_swap(
        TokenAmount(10_000_000_000_000, 6, "usd-coin"),
        TokenAmount(9_700_001_000_000, 6, "tether"),
        4,
    )
    at_threshold = engine.value_swap(
        TokenAmount(1_000_000, 6, "usd-coin"),
        TokenAmount(970_000, 6, "tether"),
        4,
    )

    assert just_above.exchange_rate == Decimal("0.9700001")
    assert just_above.is_anomalous is False
    assert at_threshold.is_anomalous is True


def test_swap_with_zero_sold_amount_has_no_rate():
    engine, _ = _engine()

    result = engine.execute(_swap(0, 1_000_000), _stable_pool())

    assert result.tokens[0].human_amount == "0"
    assert result.exchange_rate is None
    assert result.is_anomalous is False


def test_value_many_total_is_sum_of_rounded_values():
    engine, port = _engine({"a": Decimal("0.00004"), "b": Decimal("0.00004")})

    rows, total = engine.value_many(
        [TokenAmount(1_000_000, 6, "a"), TokenAmount(1_000_000, 6, "b")],
        4,
    )

    assert rows == [("1.0000", Decimal("0.0000")), ("1.0000", Decimal("0.0000"))]
    assert total == Decimal("0")
    # Rounding the unrounded sum would give a different answer.
    assert (Decimal("0.00004") * 2).quantize(Decimal("0.0001")) == Decimal("0.0001")
    assert port.calls == [["a", "b"]]


def test_value_one_returns_human_amount_and_usd():
    engine, port = _engine({"wrapped-bitcoin": Decimal("43000.5")})

    human, usd = engine.value_one(150_000_000, 8, "wrapped-bitcoin", 3)

    assert human == "1.500"
    assert usd == Decimal("64500.750")
    assert port.calls == [["wrapped-bitcoin"]]


def test_add_liquidity_uses_three_digits_and_pool_order():
    engine, _ = _engine({"usd-coin": Decimal("1"), "tether": Decimal("0.5")})
    event = AddLiquidityEvent(
        pool_name="USD Pool",
        actor="0xlp",
        transaction_hash="0xtx",
        timestamp=NOW,
        token_amounts=(2_500_000, 4_000_000),
        fees=(0, 0),
        invariant=0,
        lp_token_supply=0,
    )

    result = engine.execute(event, _stable_pool())

    assert [(t.symbol, t.human_amount, t.usd_value) for t in result.tokens] == [
        ("USDC", "2.500", Decimal("2.500")),
        ("USDT", "4.000", Decimal("2.000")),
    ]
    assert result.total_usd == Decimal("4.500")
    assert result.exchange_rate is None


def test_amounts_wider_than_default_decimal_precision_stay_exact():
    pool = PoolConfig(
        name="WETH Pool",
        production_address="0xweth",
        local_address="0xweth-local",
        tokens=("WETH", "USDC"),
        decimals=(18, 6),
        price_ids=("weth", "usd-coin"),
    )
    engine = ValuationEngine(
        price_port=FakeTokenPricePort({"weth": Decimal("1.5"), "usd-coin": Decimal("1.5")})
    )
    event = AddLiquidityEvent(
        pool_name="WETH Pool",
        actor="0xlp",
        transaction_hash="0xtx",
        timestamp=NOW,
        token_amounts=(10**45, 1),
        fees=(0, 0),
        invariant=0,
        lp_token_supply=0,
    )

    result = engine.execute(event, pool)

    expected = Decimal(f"{15 * 10**26}.000")
    assert result.tokens[0].human_amount == f"{10**27}.000"
    assert result.tokens[0].usd_value == expected
    assert result.total_usd == expected
    assert format_usd(result.total_usd) == "$1,500" + ",000" * 8 + ".00"


def test_remove_liquidity_imbalance_uses_four_digits():
    engine, _ = _engine()
    event = RemoveLiquidityImbalanceEvent(
        pool_name="USD Pool",
        actor="0xlp",
        transaction_hash="0xtx",
        timestamp=NOW,
        token_amounts=(1_234_567, 0),
        fees=(1, 1),
        invariant=0,
        lp_token_supply=0,
    )

    result = engine.execute(event, _stable_pool())

    assert [t.human_amount for t in result.tokens] == ["1.2345", "0"]


def test_remove_liquidity_one_values_only_withdrawn_token():
    engine, port = _engine()
    event = RemoveLiquidityOneEvent(
        pool_name="USD Pool",
        actor="0xlp",
        transaction_hash="0xtx",
        timestamp=NOW,
        lp_token_amount=10**18,
        lp_token_supply=10**21,
        bought_id=1,
        tokens_bought=7_000_000,
    )

    result = engine.execute(event, _stable_pool())

    assert result.tokens[0].symbol == "USDT"
    assert result.total_usd == Decimal("7.000")
    assert port.calls == [["tether"]]


def test_price_errors_propagate_unchanged():
    port = FakeTokenPricePort({}, error=PriceUnauthorizedDomainError("403"))
    engine = ValuationEngine(price_port=port)

    with pytest.raises(PriceUnauthorizedDomainError):
        engine.execute(_swap(1_000_000, 990_000), _stable_pool())
    assert len(port.calls) == 1


def test_precision_errors_propagate_before_pricing():
    engine, port = _engine()

    with pytest.raises(InvalidPrecisionError):
        engine.value_one(1, 2, "usd-coin", 4)
    assert port.calls == []
