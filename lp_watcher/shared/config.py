from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


load_dotenv()


def _env(name: str, default: str | None = None) -> str | None:
    return os.getenv(name, default)


def _bool(name: str, default: str) -> bool:
    return str(_env(name, default)).strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class Settings:
    app_env: str
    log_level: str
    pools_config_path: str
    coingecko_api_base: str
    coingecko_api_key: str
    coingecko_timeout_seconds: float
    coingecko_max_attempts: int
    coingecko_retry_delay_seconds: float
    discord_webhook_url: str
    discord_log_webhook_url: str
    discord_timeout_seconds: float
    explorer_base_url: str
    footer_icon_url: str
    escalation_mention: str
    log_raw_on_failure: bool
    dispatcher_max_workers: int

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


def get_settings() -> Settings:
    return Settings(
        app_env=_env("APP_ENV", "local"),
        log_level=_env("LOG_LEVEL", "INFO"),
        pools_config_path=_env("POOLS_CONFIG_PATH", "config/pools.json"),
        coingecko_api_base=_env("COINGECKO_API_BASE", "https://api.coingecko.com/api/v3"),
        coingecko_api_key=_env("COINGECKO_API_KEY", ""),
        coingecko_timeout_seconds=float(_env("COINGECKO_TIMEOUT_SECONDS", "10")),
        coingecko_max_attempts=int(_env("COINGECKO_MAX_ATTEMPTS", "5")),
        coingecko_retry_delay_seconds=float(_env("COINGECKO_RETRY_DELAY_SECONDS", "0.25")),
        discord_webhook_url=_env("DISCORD_WEBHOOK_URL", ""),
        discord_log_webhook_url=_env("DISCORD_LOG_WEBHOOK_URL", ""),
        discord_timeout_seconds=float(_env("DISCORD_TIMEOUT_SECONDS", "10")),
        explorer_base_url=_env("EXPLORER_BASE_URL", "https://etherscan.io"),
        footer_icon_url=_env("FOOTER_ICON_URL", ""),
        escalation_mention=_env("ESCALATION_MENTION", "@here"),
        log_raw_on_failure=_bool("LOG_RAW_ON_FAILURE", "true"),
        dispatcher_max_workers=int(_env("DISPATCHER_MAX_WORKERS", "8")),
    )
