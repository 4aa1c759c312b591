from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PoolConfig:
    name: str
    production_address: str
    local_address: str
    tokens: tuple[str, ...]
    decimals: tuple[int, ...]
    price_ids: tuple[str, ...]
    icon_url: str | None = None

    def __post_init__(self) -> None:
        if not self.tokens:
            raise ValueError(f"Pool {self.name} must list at least one token.")
        if not (len(self.tokens) == len(self.decimals) == len(self.price_ids)):
            raise ValueError(
                f"Pool {self.name} tokens, decimals and price_ids must have the same length."
            )

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    def address(self, is_production: bool) -> str:
        return self.production_address if is_production else self.local_address
