from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
import logging

import httpx
from fastapi import HTTPException

from lp_watcher.application.use_cases.dispatch_event import DispatchPolicy, EventDispatcher
from lp_watcher.application.use_cases.value_event import ValuationEngine
from lp_watcher.domain.services.notification import NotificationOptions
from lp_watcher.infrastructure.clients.discord_webhook_client import DiscordWebhookClient
from lp_watcher.infrastructure.clients.price_provider import PriceServiceAdapter
from lp_watcher.infrastructure.clients.pricing import (
    CoingeckoPriceClient,
    CoingeckoPriceClientSettings,
)
from lp_watcher.infrastructure.pools.pool_config_loader import (
    PoolConfigError,
    PoolRegistry,
    load_pool_configs,
)
from lp_watcher.shared.config import Settings, get_settings


logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_settings_dep() -> Settings:
    return get_settings()


@lru_cache(maxsize=1)
def load_pool_registry() -> PoolRegistry:
    settings = get_settings_dep()
    pools = load_pool_configs(settings.pools_config_path)
    return PoolRegistry(pools, is_production=settings.is_production)


def get_pool_registry() -> PoolRegistry:
    try:
        return load_pool_registry()
    except PoolConfigError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


@lru_cache(maxsize=1)
def _get_executor() -> ThreadPoolExecutor:
    settings = get_settings_dep()
    return ThreadPoolExecutor(
        max_workers=max(1, settings.dispatcher_max_workers),
        thread_name_prefix="event-dispatch",
    )


@lru_cache(maxsize=1)
def _get_send_executor() -> ThreadPoolExecutor:
    settings = get_settings_dep()
    return ThreadPoolExecutor(
        max_workers=max(1, settings.dispatcher_max_workers),
        thread_name_prefix="notification-send",
    )


@lru_cache(maxsize=1)
def _get_price_http_client() -> httpx.Client:
    return httpx.Client(timeout=get_settings_dep().coingecko_timeout_seconds)


@lru_cache(maxsize=1)
def _get_discord_http_client() -> httpx.Client:
    return httpx.Client(timeout=get_settings_dep().discord_timeout_seconds)


@lru_cache(maxsize=1)
def _get_valuation_engine() -> ValuationEngine:
    settings = get_settings_dep()
    client = CoingeckoPriceClient(
        CoingeckoPriceClientSettings(
            api_base=settings.coingecko_api_base,
            api_key=settings.coingecko_api_key,
            max_attempts=settings.coingecko_max_attempts,
            retry_delay_seconds=settings.coingecko_retry_delay_seconds,
        ),
        http_client=_get_price_http_client(),
    )
    return ValuationEngine(price_port=PriceServiceAdapter(client))


@lru_cache(maxsize=1)
def get_event_dispatcher() -> EventDispatcher:
    settings = get_settings_dep()
    notifier = DiscordWebhookClient(
        webhook_url=settings.discord_webhook_url,
        log_webhook_url=settings.discord_log_webhook_url,
        http_client=_get_discord_http_client(),
    )
    return EventDispatcher(
        valuation_engine=_get_valuation_engine(),
        notifier=notifier,
        executor=_get_executor(),
        send_executor=_get_send_executor(),
        policy=DispatchPolicy(
            is_production=settings.is_production,
            log_raw_on_failure=settings.log_raw_on_failure,
            notification=NotificationOptions(
                explorer_base_url=settings.explorer_base_url,
                footer_icon_url=settings.footer_icon_url or None,
                escalation_mention=settings.escalation_mention,
            ),
        ),
    )


def shutdown_dependencies() -> None:
    # In-flight events still hold the HTTP clients; let them drain first.
    if get_event_dispatcher.cache_info().currsize:
        get_event_dispatcher().shutdown()
    else:
        for factory in (_get_executor, _get_send_executor):
            if factory.cache_info().currsize:
                factory().shutdown(wait=True)
    for factory in (_get_price_http_client, _get_discord_http_client):
        if factory.cache_info().currsize:
            factory().close()
    logger.info("deps: shutdown_complete")
