from __future__ import annotations

from decimal import Decimal

from lp_watcher.application.ports.token_price_port import TokenPricePort
from lp_watcher.domain.exceptions import (
    MissingPriceQuoteError,
    PriceFetchExhaustedError,
    PriceLookupDomainError,
    PriceUnauthorizedDomainError,
)
from lp_watcher.infrastructure.clients.pricing import (
    CoingeckoPriceClient,
    PriceLookupError,
    PriceRetriesExhaustedError,
    PriceUnauthorizedError,
)


class PriceServiceAdapter(TokenPricePort):
    def __init__(self, price_client: CoingeckoPriceClient):
        self._price_client = price_client

    def get_prices_usd(self, *, price_ids: list[str]) -> dict[str, Decimal]:
        try:
            prices = self._price_client.fetch_prices(price_ids)
        except PriceUnauthorizedError as exc:
            raise PriceUnauthorizedDomainError(str(exc)) from exc
        except PriceRetriesExhaustedError as exc:
            raise PriceFetchExhaustedError(str(exc)) from exc
        except PriceLookupError as exc:
            raise PriceLookupDomainError(str(exc)) from exc

        missing = [price_id for price_id in price_ids if price_id not in prices]
        if missing:
            raise MissingPriceQuoteError(f"No USD quote for: {', '.join(missing)}.")
        return {price_id: prices[price_id] for price_id in price_ids}
