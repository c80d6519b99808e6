import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from helios.config import settings
from helios.core.middleware import setup_middleware

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    if settings.geolocation_enabled:
        logger.info("Live geolocation via %s", settings.GEOLOCATION_URL)
    else:
        logger.info("Live geolocation disabled; always using %s", settings.DEFAULT_LOCATION_LABEL)

    yield

    from helios.api.v1.websocket import manager
    if manager.connections:
        logger.info("Shutting down with %d device(s) connected", len(manager.connections))


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Helios Companion Bridge",
        version="0.1.0",
        description="Dawn, sunrise, sunset and dusk times for a paired watch",
        debug=settings.APP_DEBUG,
        lifespan=lifespan,
    )

    setup_middleware(app)

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    # Register API routers
    from helios.api.v1 import router as api_v1_router
    app.include_router(api_v1_router, prefix="/api/v1")

    return app


app = create_app()
