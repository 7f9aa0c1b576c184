# server.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from iggy_bridge.api import messages as messages_router
from iggy_bridge.api import stats as stats_router
from iggy_bridge.core.config import Settings, get_settings
from iggy_bridge.core.errors import install_exception_handlers
from iggy_bridge.core.log import setup_logging
from iggy_bridge.infra.iggy.client import IggyTransport
from iggy_bridge.infra.iggy.transport import BrokerTransport
from iggy_bridge.services.iggy_service import IggyService

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None, transport: BrokerTransport | None = None) -> FastAPI:
    """Build the API. The Iggy client is created in the lifespan and lives on `app.state`."""
    settings = settings or get_settings()

    # Lifespan handler replaces @app.on_event("startup"/"shutdown")
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level)
        # Connection is lazy: the first request connects and provisions.
        app.state.iggy = IggyService(settings, transport or IggyTransport(settings))
        logger.info("Iggy client ready for %s (%s/%s)",
                    settings.iggy_address, settings.stream_name, settings.topic_name)
        try:
            yield
        finally:
            await app.state.iggy.disconnect()

    app = FastAPI(
        title="Iggy Stream API",
        version="1.0.0",
        lifespan=lifespan,
        openapi_url="/api/v1/openapi.json",
        docs_url="/api/v1/docs",
        redoc_url="/api/v1/redoc",
    )
    app.state.settings = settings

    # --- CORS: allow web-ui during development (configurable via settings.cors_allow_origins) ---
    allow_origins = settings.cors_allow_origins or [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    install_exception_handlers(app)

    app.include_router(messages_router.router, prefix="/api/v1")
    app.include_router(stats_router.router, prefix="/api/v1")

    if settings.metrics_enabled:
        from iggy_bridge.api import metrics as metrics_router
        # metrics lives at /metrics (Prometheus convention)
        app.include_router(metrics_router.router, prefix="")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("server:app", host="0.0.0.0", port=8000, reload=True)
