from __future__ import annotations

from lp_watcher.domain.entities.events import (
    RawEvent,
    RemoveLiquidityOneEvent,
    SwapEvent,
)
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.exceptions import EventInputError


def _check_index(pool: PoolConfig, index: int, field_name: str) -> None:
    if index < 0 or index >= pool.token_count:
        raise EventInputError(
            f"{field_name}={index} is out of range for pool {pool.name} "
            f"with {pool.token_count} tokens."
        )


def _check_amount(value: int, field_name: str) -> None:
    if value < 0:
        raise EventInputError(f"{field_name} must be non-negative.")


def validate_event_for_pool(event: RawEvent, pool: PoolConfig) -> None:
    if event.pool_name != pool.name:
        raise EventInputError(f"Event belongs to pool {event.pool_name}, not {pool.name}.")

    if isinstance(event, SwapEvent):
        _check_index(pool, event.sold_id, "sold_id")
        _check_index(pool, event.bought_id, "bought_id")
        _check_amount(event.tokens_sold, "tokens_sold")
        _check_amount(event.tokens_bought, "tokens_bought")
        return

    if isinstance(event, RemoveLiquidityOneEvent):
        _check_index(pool, event.bought_id, "bought_id")
        _check_amount(event.tokens_bought, "tokens_bought")
        return

    if len(event.token_amounts) != pool.token_count:
        raise EventInputError(
            f"token_amounts has {len(event.token_amounts)} entries; "
            f"pool {pool.name} has {pool.token_count} tokens."
        )
    for index, amount in enumerate(event.token_amounts):
        _check_amount(amount, f"token_amounts[{index}]")
