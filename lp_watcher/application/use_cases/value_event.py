from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from lp_watcher.application.ports.token_price_port import TokenPricePort
from lp_watcher.domain.entities.events import RawEvent, RemoveLiquidityOneEvent, SwapEvent
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.entities.valuation import TokenValuation, ValuationResult
from lp_watcher.domain.services.decimal_converter import to_human_string
from lp_watcher.domain.services.valuation import (
    DIGITS_TO_SHOW,
    exchange_rate,
    is_rate_anomalous,
    sum_usd,
    usd_value,
)


@dataclass(frozen=True)
class TokenAmount:
    raw_amount: int
    decimals: int
    price_id: str


@dataclass(frozen=True)
class SwapValuation:
    sold: tuple[str, Decimal]
    bought: tuple[str, Decimal]
    exchange_rate: Decimal | None
    is_anomalous: bool


class ValuationEngine:
    """Turns raw pool amounts into display strings and USD values.

    Each public call fetches the prices it needs exactly once. Errors from the
    price port or the decimal converter are not caught here.
    """

    def __init__(self, *, price_port: TokenPricePort):
        self._price_port = price_port

    def value_one(
        self,
        raw_amount: int,
        decimals: int,
        price_id: str,
        digits_to_show: int,
    ) -> tuple[str, Decimal]:
        human = to_human_string(raw_amount, decimals, digits_to_show)
        prices = self._price_port.get_prices_usd(price_ids=[price_id])
        return human, usd_value(human, prices[price_id], digits_to_show)

    def value_many(
        self,
        amounts: list[TokenAmount],
        digits_to_show: int,
    ) -> tuple[list[tuple[str, Decimal]], Decimal]:
        humans = [to_human_string(a.raw_amount, a.decimals, digits_to_show) for a in amounts]
        prices = self._price_port.get_prices_usd(price_ids=[a.price_id for a in amounts])
        rows = [
            (human, usd_value(human, prices[amount.price_id], digits_to_show))
            for human, amount in zip(humans, amounts)
        ]
        # Total of the rounded per-token values so it matches the displayed fields.
        return rows, sum_usd([usd for _, usd in rows])

    def value_swap(
        self,
        sold: TokenAmount,
        bought: TokenAmount,
        digits_to_show: int,
    ) -> SwapValuation:
        (sold_row, bought_row), _ = self.value_many([sold, bought], digits_to_show)
        rate = exchange_rate(sold_row[0], bought_row[0])
        return SwapValuation(
            sold=sold_row,
            bought=bought_row,
            exchange_rate=rate,
            is_anomalous=is_rate_anomalous(rate),
        )

    def execute(self, event: RawEvent, pool: PoolConfig) -> ValuationResult:
        digits_to_show = DIGITS_TO_SHOW[event.kind]

        if isinstance(event, SwapEvent):
            swap = self.value_swap(
                _token_amount(pool, event.sold_id, event.tokens_sold),
                _token_amount(pool, event.bought_id, event.tokens_bought),
                digits_to_show,
            )
            return ValuationResult(
                tokens=(
                    TokenValuation(pool.tokens[event.sold_id], *swap.sold),
                    TokenValuation(pool.tokens[event.bought_id], *swap.bought),
                ),
                total_usd=swap.sold[1],
                exchange_rate=swap.exchange_rate,
                is_anomalous=swap.is_anomalous,
            )

        if isinstance(event, RemoveLiquidityOneEvent):
            amount = _token_amount(pool, event.bought_id, event.tokens_bought)
            human, usd = self.value_one(
                amount.raw_amount, amount.decimals, amount.price_id, digits_to_show
            )
            return ValuationResult(
                tokens=(TokenValuation(pool.tokens[event.bought_id], human, usd),),
                total_usd=usd,
            )

        rows, total = self.value_many(
            [_token_amount(pool, index, raw) for index, raw in enumerate(event.token_amounts)],
            digits_to_show,
        )
        return ValuationResult(
            tokens=tuple(
                TokenValuation(symbol, human, usd)
                for symbol, (human, usd) in zip(pool.tokens, rows)
            ),
            total_usd=total,
        )


def _token_amount(pool: PoolConfig, index: int, raw_amount: int) -> TokenAmount:
    return TokenAmount(
        raw_amount=raw_amount,
        decimals=pool.decimals[index],
        price_id=pool.price_ids[index],
    )
