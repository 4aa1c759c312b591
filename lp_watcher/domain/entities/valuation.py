from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TokenValuation:
    symbol: str
    human_amount: str
    usd_value: Decimal


@dataclass(frozen=True)
class ValuationResult:
    tokens: tuple[TokenValuation, ...]
    total_usd: Decimal
    exchange_rate: Decimal | None = None
    is_anomalous: bool = False
