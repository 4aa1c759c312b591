from __future__ import annotations

from contextlib import asynccontextmanager
import logging

from fastapi import FastAPI

from lp_watcher.api.deps import (
    get_event_dispatcher,
    get_settings_dep,
    load_pool_registry,
    shutdown_dependencies,
)
from lp_watcher.api.routers.events import router as events_router
from lp_watcher.api.routers.health import router as health_router
from lp_watcher.shared.logging_config import configure_logging


logger = logging.getLogger(__name__)


def startup_notice(app_env: str, pool_names: list[str]) -> str:
    return f"LP Watcher started env={app_env} pools={','.join(pool_names)}"


@asynccontextmanager
async def lifespan(_app: FastAPI):
    settings = get_settings_dep()
    configure_logging(settings.log_level)
    # PoolConfigError propagates here and aborts startup.
    registry = load_pool_registry()
    notice = startup_notice(settings.app_env, [pool.name for pool in registry.all()])
    logger.info("main: started env=%s pools=%s", settings.app_env, len(registry))
    get_event_dispatcher().announce(notice)
    yield
    shutdown_dependencies()


def create_app() -> FastAPI:
    app = FastAPI(title="LP Watcher", lifespan=lifespan)
    app.include_router(health_router)
    app.include_router(events_router)
    return app


app = create_app()
