"""openvolume plugin FastAPI application."""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from openvolume import __version__
from openvolume.api import health_router, plugin_router
from openvolume.api.dependencies import init_runtime, reset_runtime
from openvolume.config import get_plugin_config
from openvolume.logging import setup_logging
from openvolume.logging_schema import LogEvent

# Import metrics to ensure they are registered
import openvolume.metrics  # noqa: F401

_config = get_plugin_config()
setup_logging(_config.logging)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info(
        "Starting openvolume plugin",
        extra={
            "event": LogEvent.APP_STARTED,
            "version": __version__,
            "root_path": str(_config.volume.root_path),
            "driver": _config.volume.storage_driver,
        },
    )
    await init_runtime()
    yield
    logger.info("Shutting down openvolume plugin", extra={"event": LogEvent.APP_STOPPED})
    reset_runtime()


app = FastAPI(
    title="openvolume",
    description="File-backed local volume plugin",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed plugin requests still answer in protocol shape."""
    return JSONResponse(
        status_code=400,
        content={"Err": f"Invalid request: {exc.errors()}"},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions with logging."""
    logger.exception(
        "Unhandled exception",
        extra={
            "event": LogEvent.UNHANDLED_EXCEPTION,
            "path": request.url.path,
            "method": request.method,
        },
    )
    return JSONResponse(
        status_code=500,
        content={"Err": "Internal error"},
    )


app.include_router(health_router)
app.include_router(plugin_router)


@app.get("/metrics", include_in_schema=False)
async def metrics() -> Response:
    """Expose Prometheus metrics."""
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST,
    )


def main() -> None:
    """Serve the plugin on its unix socket."""
    config = get_plugin_config()
    socket_path = config.server.socket_path
    socket_path.parent.mkdir(parents=True, exist_ok=True)
    uvicorn.run(
        "openvolume.main:app",
        uds=str(socket_path),
        reload=False,
        log_config=None,
    )


if __name__ == "__main__":
    main()
