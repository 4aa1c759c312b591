from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Literal, Union


EventKind = Literal[
    "Swap",
    "AddLiquidity",
    "RemoveLiquidity",
    "RemoveLiquidityOne",
    "RemoveLiquidityImbalance",
]


@dataclass(frozen=True)
class PoolEvent:
    pool_name: str
    actor: str
    transaction_hash: str
    timestamp: datetime

    kind: ClassVar[EventKind]
    # Event name as emitted by the pool contract.
    log_name: ClassVar[str]


@dataclass(frozen=True)
class SwapEvent(PoolEvent):
    tokens_sold: int
    tokens_bought: int
    sold_id: int
    bought_id: int

    kind: ClassVar[EventKind] = "Swap"
    log_name: ClassVar[str] = "TokenSwap"


@dataclass(frozen=True)
class AddLiquidityEvent(PoolEvent):
    token_amounts: tuple[int, ...]
    fees: tuple[int, ...]
    invariant: int
    lp_token_supply: int

    kind: ClassVar[EventKind] = "AddLiquidity"
    log_name: ClassVar[str] = "AddLiquidity"


@dataclass(frozen=True)
class RemoveLiquidityEvent(PoolEvent):
    token_amounts: tuple[int, ...]
    lp_token_supply: int

    kind: ClassVar[EventKind] = "RemoveLiquidity"
    log_name: ClassVar[str] = "RemoveLiquidity"


@dataclass(frozen=True)
class RemoveLiquidityOneEvent(PoolEvent):
    lp_token_amount: int
    lp_token_supply: int
    bought_id: int
    tokens_bought: int

    kind: ClassVar[EventKind] = "RemoveLiquidityOne"
    log_name: ClassVar[str] = "RemoveLiquidityOne"


@dataclass(frozen=True)
class RemoveLiquidityImbalanceEvent(PoolEvent):
    token_amounts: tuple[int, ...]
    fees: tuple[int, ...]
    invariant: int
    lp_token_supply: int

    kind: ClassVar[EventKind] = "RemoveLiquidityImbalance"
    log_name: ClassVar[str] = "RemoveLiquidityImbalance"


RawEvent = Union[
    SwapEvent,
    AddLiquidityEvent,
    RemoveLiquidityEvent,
    RemoveLiquidityOneEvent,
    RemoveLiquidityImbalanceEvent,
]

MultiTokenEvent = Union[AddLiquidityEvent, RemoveLiquidityEvent, RemoveLiquidityImbalanceEvent]
