from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class PoolEventRequest(BaseModel):
    pool: str = Field(..., description="Pool name or contract address.")
    actor: str = Field(..., description="Address that triggered the event.")
    transaction_hash: str
    timestamp: datetime | None = Field(
        None, description="Block timestamp; defaults to the time the event is received."
    )


class SwapEventRequest(PoolEventRequest):
    kind: Literal["Swap"]
    tokens_sold: int = Field(..., ge=0)
    tokens_bought: int = Field(..., ge=0)
    sold_id: int = Field(..., ge=0)
    bought_id: int = Field(..., ge=0)


class AddLiquidityEventRequest(PoolEventRequest):
    kind: Literal["AddLiquidity"]
    token_amounts: list[int] = Field(..., min_length=1)
    fees: list[int] = Field(default_factory=list)
    invariant: int = 0
    lp_token_supply: int = 0


class RemoveLiquidityEventRequest(PoolEventRequest):
    kind: Literal["RemoveLiquidity"]
    token_amounts: list[int] = Field(..., min_length=1)
    lp_token_supply: int = 0


class RemoveLiquidityOneEventRequest(PoolEventRequest):
    kind: Literal["RemoveLiquidityOne"]
    lp_token_amount: int = Field(..., ge=0)
    lp_token_supply: int = 0
    bought_id: int = Field(..., ge=0)
    tokens_bought: int = Field(..., ge=0)


class RemoveLiquidityImbalanceEventRequest(PoolEventRequest):
    kind: Literal["RemoveLiquidityImbalance"]
    token_amounts: list[int] = Field(..., min_length=1)
    fees: list[int] = Field(default_factory=list)
    invariant: int = 0
    lp_token_supply: int = 0


EventRequest = Annotated[
    Union[
        SwapEventRequest,
        AddLiquidityEventRequest,
        RemoveLiquidityEventRequest,
        RemoveLiquidityOneEventRequest,
        RemoveLiquidityImbalanceEventRequest,
    ],
    Field(discriminator="kind"),
]


class EventAcceptedResponse(BaseModel):
    accepted: bool
    pool: str
    kind: str
    transaction_hash: str


class HealthResponse(BaseModel):
    status: str
    pools: int
    production: bool
