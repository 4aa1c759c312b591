from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from lp_watcher.api.deps import get_event_dispatcher, get_pool_registry
from lp_watcher.api.schemas.events import (
    AddLiquidityEventRequest,
    EventAcceptedResponse,
    EventRequest,
    RemoveLiquidityEventRequest,
    RemoveLiquidityOneEventRequest,
    SwapEventRequest,
)
from lp_watcher.application.use_cases.dispatch_event import EventDispatcher
from lp_watcher.domain.entities.events import (
    AddLiquidityEvent,
    RawEvent,
    RemoveLiquidityEvent,
    RemoveLiquidityImbalanceEvent,
    RemoveLiquidityOneEvent,
    SwapEvent,
)
from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.exceptions import EventInputError, PoolNotFoundError
from lp_watcher.domain.services.event_validation import validate_event_for_pool
from lp_watcher.infrastructure.pools.pool_config_loader import PoolRegistry

router = APIRouter()


def _to_event(req: EventRequest, pool: PoolConfig) -> RawEvent:
    common = {
        "pool_name": pool.name,
        "actor": req.actor,
        "transaction_hash": req.transaction_hash,
        "timestamp": req.timestamp or datetime.now(timezone.utc),
    }
    if isinstance(req, SwapEventRequest):
        return SwapEvent(
            **common,
            tokens_sold=req.tokens_sold,
            tokens_bought=req.tokens_bought,
            sold_id=req.sold_id,
            bought_id=req.bought_id,
        )
    if isinstance(req, AddLiquidityEventRequest):
        return AddLiquidityEvent(
            **common,
            token_amounts=tuple(req.token_amounts),
            fees=tuple(req.fees),
            invariant=req.invariant,
            lp_token_supply=req.lp_token_supply,
        )
    if isinstance(req, RemoveLiquidityEventRequest):
        return RemoveLiquidityEvent(
            **common,
            token_amounts=tuple(req.token_amounts),
            lp_token_supply=req.lp_token_supply,
        )
    if isinstance(req, RemoveLiquidityOneEventRequest):
        return RemoveLiquidityOneEvent(
            **common,
            lp_token_amount=req.lp_token_amount,
            lp_token_supply=req.lp_token_supply,
            bought_id=req.bought_id,
            tokens_bought=req.tokens_bought,
        )
    return RemoveLiquidityImbalanceEvent(
        **common,
        token_amounts=tuple(req.token_amounts),
        fees=tuple(req.fees),
        invariant=req.invariant,
        lp_token_supply=req.lp_token_supply,
    )


@router.post("/v1/events", status_code=202, response_model=EventAcceptedResponse)
def ingest_event(
    req: EventRequest,
    registry: PoolRegistry = Depends(get_pool_registry),
    dispatcher: EventDispatcher = Depends(get_event_dispatcher),
):
    try:
        pool = registry.get(req.pool)
        event = _to_event(req, pool)
        validate_event_for_pool(event, pool)
    except PoolNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except EventInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    dispatcher.submit(event, pool)
    return EventAcceptedResponse(
        accepted=True,
        pool=pool.name,
        kind=event.kind,
        transaction_hash=event.transaction_hash,
    )
