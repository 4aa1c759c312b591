from __future__ import annotations

from dataclasses import dataclass

from lp_watcher.domain.entities.notification import NotificationMessage
from lp_watcher.domain.entities.valuation import ValuationResult


@dataclass(frozen=True)
class DispatchResult:
    sent: NotificationMessage | None
    logged_raw: str | None
    valuation: ValuationResult | None = None
    error: str | None = None
