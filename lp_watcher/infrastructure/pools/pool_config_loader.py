from __future__ import annotations

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, model_validator

from lp_watcher.domain.entities.pool import PoolConfig
from lp_watcher.domain.exceptions import PoolNotFoundError


logger = logging.getLogger(__name__)


class PoolConfigError(RuntimeError):
    pass


class PoolConfigRecord(BaseModel):
    name: str = Field(..., min_length=1)
    address: str = Field(..., description="Pool address on the production network.")
    local_address: str | None = Field(
        None, description="Pool address on the local/test network; defaults to address."
    )
    tokens: list[str] = Field(..., min_length=1)
    decimals: list[int]
    price_ids: list[str]
    icon_url: str | None = None

    @model_validator(mode="after")
    def _check_alignment(self) -> "PoolConfigRecord":
        if not (len(self.tokens) == len(self.decimals) == len(self.price_ids)):
            raise ValueError("tokens, decimals and price_ids must have the same length.")
        if any(value < 0 for value in self.decimals):
            raise ValueError("decimals must be non-negative.")
        return self

    def to_entity(self) -> PoolConfig:
        return PoolConfig(
            name=self.name,
            production_address=self.address,
            local_address=self.local_address or self.address,
            tokens=tuple(self.tokens),
            decimals=tuple(self.decimals),
            price_ids=tuple(self.price_ids),
            icon_url=self.icon_url,
        )


def parse_pool_configs(payload: object) -> list[PoolConfig]:
    if not isinstance(payload, list):
        raise PoolConfigError("Pool config must be a JSON list of pool records.")
    pools: list[PoolConfig] = []
    for index, item in enumerate(payload):
        try:
            pools.append(PoolConfigRecord.model_validate(item).to_entity())
        except ValidationError as exc:
            raise PoolConfigError(f"Invalid pool config at index {index}: {exc}") from exc
    return pools


def load_pool_configs(path: str | Path) -> list[PoolConfig]:
    config_path = Path(path)
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PoolConfigError(f"Could not read pool config {config_path}: {exc}") from exc
    pools = parse_pool_configs(payload)
    logger.info("pool_config_loader: loaded_pools count=%s path=%s", len(pools), config_path)
    return pools


class PoolRegistry:
    """Read-only lookup of the pools configured at startup."""

    def __init__(self, pools: list[PoolConfig], *, is_production: bool):
        self._is_production = is_production
        self._by_name: dict[str, PoolConfig] = {}
        self._by_address: dict[str, PoolConfig] = {}
        for pool in pools:
            if pool.name in self._by_name:
                raise PoolConfigError(f"Duplicate pool name: {pool.name}")
            self._by_name[pool.name] = pool
            self._by_address[pool.address(is_production).lower()] = pool

    def __len__(self) -> int:
        return len(self._by_name)

    def all(self) -> list[PoolConfig]:
        return list(self._by_name.values())

    def get(self, name_or_address: str) -> PoolConfig:
        pool = self._by_name.get(name_or_address) or self._by_address.get(
            name_or_address.lower()
        )
        if pool is None:
            raise PoolNotFoundError(f"Pool not found: {name_or_address}")
        return pool
