from __future__ import annotations

from dataclasses import dataclass

from lp_watcher.domain.entities.events import (
    AddLiquidityEvent,
    RawEvent,
    RemoveLiquidityOneEvent,
    SwapEvent,
)
from lp_watcher.domain.entities.notification import (
    NotificationAuthor,
    NotificationField,
    NotificationFooter,
    NotificationMessage,
)
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.entities.valuation import TokenValuation, ValuationResult
from lp_watcher.domain.services.valuation import ANOMALY_RATE_THRESHOLD, format_usd


SWAP_COLOR = "#0099ff"
DEPOSIT_COLOR = "#33ff33"
WITHDRAW_COLOR = "#FF9A00"

TEST_NETWORK_FOOTER = "Test network"
AMOUNT_SEPARATOR = ", "


@dataclass(frozen=True)
class NotificationOptions:
    explorer_base_url: str = "https://etherscan.io"
    footer_icon_url: str | None = None
    escalation_mention: str = "@here"


def format_amount(token: TokenValuation) -> str:
    return f"{token.human_amount} {token.symbol} ({format_usd(token.usd_value)})"


def join_amounts(tokens: tuple[TokenValuation, ...]) -> str:
    return AMOUNT_SEPARATOR.join(format_amount(token) for token in tokens)


def _swap_fields(
    valuation: ValuationResult,
    options: NotificationOptions,
) -> list[NotificationField]:
    sold, bought = valuation.tokens
    fields = [
        NotificationField("Input amount", format_amount(sold), inline=True),
        NotificationField("Output amount", format_amount(bought), inline=True),
    ]
    if valuation.is_anomalous:
        fields.append(
            NotificationField(
                "Exchange rate alert",
                f"Implied rate {valuation.exchange_rate:f} {bought.symbol} per {sold.symbol} "
                f"is at or below {ANOMALY_RATE_THRESHOLD}. {options.escalation_mention}",
                inline=False,
            )
        )
    return fields


def _liquidity_fields(label: str, valuation: ValuationResult) -> list[NotificationField]:
    return [
        NotificationField(label, join_amounts(valuation.tokens), inline=False),
        NotificationField("Total value", format_usd(valuation.total_usd), inline=False),
    ]


def compose_notification(
    event: RawEvent,
    valuation: ValuationResult,
    pool: PoolConfig,
    *,
    is_production: bool,
    options: NotificationOptions,
) -> NotificationMessage:
    explorer = options.explorer_base_url.rstrip("/")

    if isinstance(event, SwapEvent):
        title, color = "Token swap", SWAP_COLOR
        sold, bought = valuation.tokens
        description = f"{event.actor} swapped {sold.symbol} to {bought.symbol}"
        fields = _swap_fields(valuation, options)
    elif isinstance(event, AddLiquidityEvent):
        title, color = "Deposit", DEPOSIT_COLOR
        description = f"{event.actor} added new liquidity to the {pool.name}"
        fields = _liquidity_fields("Deposit amounts", valuation)
    elif isinstance(event, RemoveLiquidityOneEvent):
        title, color = "Withdraw", WITHDRAW_COLOR
        description = f"{event.actor} removed liquidity from the {pool.name}"
        fields = [NotificationField("Withdraw amounts", join_amounts(valuation.tokens))]
    else:
        title, color = "Withdraw", WITHDRAW_COLOR
        description = f"{event.actor} removed liquidity from the {pool.name}"
        fields = _liquidity_fields("Withdraw amounts", valuation)

    footer = NotificationFooter(event.log_name, options.footer_icon_url)
    if not is_production:
        footer = NotificationFooter(TEST_NETWORK_FOOTER, options.footer_icon_url)

    return NotificationMessage(
        title=title,
        color=color,
        url=f"{explorer}/tx/{event.transaction_hash}",
        author=NotificationAuthor(
            name=pool.name,
            icon_url=pool.icon_url,
            url=f"{explorer}/address/{pool.address(is_production)}",
        ),
        description=description,
        fields=tuple(fields),
        footer=footer,
        timestamp=event.timestamp,
        mention=options.escalation_mention if valuation.is_anomalous else None,
    )
