from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
import logging
import time

import httpx


logger = logging.getLogger(__name__)


class PriceLookupError(RuntimeError):
    pass


class PriceUnauthorizedError(PriceLookupError):
    pass


class PriceRetriesExhaustedError(PriceLookupError):
    pass


@dataclass(frozen=True)
class CoingeckoPriceClientSettings:
    api_base: str
    api_key: str
    max_attempts: int
    retry_delay_seconds: float


def _parse_prices(payload: object, vs_currency: str) -> dict[str, Decimal]:
    if not isinstance(payload, dict):
        raise ValueError("Price response must be a JSON object.")
    prices: dict[str, Decimal] = {}
    for price_id, quote in payload.items():
        if not isinstance(quote, dict) or vs_currency not in quote:
            continue
        try:
            value = Decimal(str(quote[vs_currency]))
        except InvalidOperation as exc:
            raise ValueError(f"Invalid {vs_currency} price for {price_id}.") from exc
        if not value.is_finite() or value < 0:
            raise ValueError(f"Invalid {vs_currency} price for {price_id}.")
        prices[price_id] = value
    return prices


class CoingeckoPriceClient:
    """Spot USD prices from the CoinGecko ``simple/price`` endpoint.

    Every call goes to the network; quotes are never cached between calls.
    """

    vs_currency = "usd"

    def __init__(self, settings: CoingeckoPriceClientSettings, http_client: httpx.Client):
        self._settings = settings
        self._http = http_client

    def fetch_prices(self, price_ids: list[str]) -> dict[str, Decimal]:
        unique_ids = list(dict.fromkeys(price_ids))
        if not unique_ids:
            return {}

        url = f"{self._settings.api_base.rstrip('/')}/simple/price"
        params = {"ids": ",".join(unique_ids), "vs_currencies": self.vs_currency}
        headers = {"x-cg-demo-api-key": self._settings.api_key} if self._settings.api_key else {}

        attempts = max(1, self._settings.max_attempts)
        delay = self._settings.retry_delay_seconds
        last_exc: Exception | None = None

        for attempt in range(1, attempts + 1):
            try:
                response = self._http.get(url, params=params, headers=headers)
                if response.status_code == 403:
                    logger.warning(
                        "pricing: price_fetch_unauthorized ids=%s",
                        params["ids"],
                    )
                    raise PriceUnauthorizedError("Price service rejected the request (403).")
                response.raise_for_status()
                prices = _parse_prices(response.json(), self.vs_currency)
            except PriceUnauthorizedError:
                raise
            except (httpx.HTTPError, ValueError) as exc:
                last_exc = exc
                if attempt == attempts:
                    break
                logger.warning(
                    "pricing: price_fetch_retry attempt=%s/%s ids=%s error=%s",
                    attempt,
                    attempts,
                    params["ids"],
                    exc,
                )
                time.sleep(delay)
                delay *= 2
                continue

            logger.debug(
                "pricing: fetched_prices requested=%s fetched=%s attempt=%s",
                len(unique_ids),
                len(prices),
                attempt,
            )
            return prices

        raise PriceRetriesExhaustedError(
            f"Price request failed after {attempts} attempts: {last_exc}"
        ) from last_exc
