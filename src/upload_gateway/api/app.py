import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from upload_gateway import __version__
from upload_gateway.api.routes.system import router as system_router
from upload_gateway.api.routes.uploads import router as uploads_router
from upload_gateway.config import Settings, get_settings
from upload_gateway.pipeline import build_pipelines
from upload_gateway.remote_sync import RemoteSync

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(app.state.settings)
    logger.info("Starting upload-gateway API")

    # Ensure the static host bucket exists
    app.state.remote_sync.ensure_bucket()

    yield

    logger.info("Shutting down upload-gateway API")


def create_app(
    settings: Settings | None = None,
    remote_sync: RemoteSync | None = None,
) -> FastAPI:
    """Build the app; endpoint configuration errors surface here, at startup."""
    settings = settings or get_settings()
    remote_sync = remote_sync or RemoteSync.from_settings(settings)

    app = FastAPI(
        title="Upload Gateway",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.remote_sync = remote_sync
    app.state.pipelines = build_pipelines(remote_sync, settings)

    app.include_router(system_router, prefix="/api")
    app.include_router(uploads_router, prefix="/api")

    return app


app = create_app()


def main():
    """Entry point for upload-gateway-api script."""
    uvicorn.run(
        "upload_gateway.api.app:app",
        host="0.0.0.0",
        port=8000,
        reload=False,
    )
