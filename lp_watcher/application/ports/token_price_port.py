from __future__ import annotations

from decimal import Decimal
from typing import Protocol


class TokenPricePort(Protocol):
    def get_prices_usd(self, *, price_ids: list[str]) -> dict[str, Decimal]:
        ...
