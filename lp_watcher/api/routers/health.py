from __future__ import annotations

from fastapi import APIRouter, Depends

from lp_watcher.api.deps import get_pool_registry, get_settings_dep
from lp_watcher.api.schemas.events import HealthResponse
from lp_watcher.infrastructure.pools.pool_config_loader import PoolRegistry
from lp_watcher.shared.config import Settings

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(
    registry: PoolRegistry = Depends(get_pool_registry),
    settings: Settings = Depends(get_settings_dep),
):
    return HealthResponse(status="ok", pools=len(registry), production=settings.is_production)
